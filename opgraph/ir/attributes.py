# Copyright 2025 Ant Group Co., Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Element-container attributes for constant tensor data."""

from __future__ import annotations

from typing import Any, ClassVar

import numpy as np

from opgraph.ir import serde
from opgraph.ir.typing import TensorType, scalar_type_from_dtype


@serde.register_class
class DenseElementsAttr:
    """Constant tensor data attached to an operation.

    The payload is either a full array whose shape matches ``type.shape`` or,
    for a splat, a single 0-d array holding the repeated element. Splats keep
    a compact representation regardless of the logical tensor size.

    Example:
        >>> DenseElementsAttr.from_array(np.eye(2, dtype=np.float32))
        dense<[[1.0, 0.0], [0.0, 1.0]]> : Tensor[f32, (2, 2)]
        >>> DenseElementsAttr.splat(0.0, Tensor[f32, (1024, 1024)])
        dense<0.0> : Tensor[f32, (1024, 1024)]
    """

    def __init__(self, values: Any, type: TensorType):
        if not isinstance(type, TensorType):
            raise TypeError(f"Expected TensorType, got {type.__class__.__name__}")
        values = np.asarray(values)
        if values.ndim != 0 and values.shape != type.shape:
            raise ValueError(
                f"Values of shape {values.shape} do not match {type}; "
                "pass a scalar for a splat"
            )
        self.values = values
        self.type = type

    @classmethod
    def from_array(cls, array: Any) -> DenseElementsAttr:
        array = np.asarray(array)
        tensor_type = TensorType(scalar_type_from_dtype(array.dtype), array.shape)
        if array.ndim == 0:
            return cls(array.reshape(()), tensor_type)
        return cls(array, tensor_type)

    @classmethod
    def splat(cls, value: Any, type: TensorType) -> DenseElementsAttr:
        return cls(np.asarray(value).reshape(()), type)

    @property
    def is_splat(self) -> bool:
        """True if every element holds the same value."""
        if self.values.ndim == 0:
            return True
        if self.values.size == 0:
            return False
        return bool(np.all(self.values == self.values.flat[0]))

    @property
    def rank(self) -> int:
        return self.type.rank

    @property
    def num_elements(self) -> int:
        return self.type.num_elements

    def __str__(self) -> str:
        if self.is_splat:
            payload = repr(self.values.flat[0].item())
        else:
            payload = str(self.values.tolist())
        return f"dense<{payload}> : {self.type}"

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseElementsAttr):
            return False
        return self.type == other.type and np.array_equal(self.values, other.values)

    __hash__ = None  # type: ignore[assignment]

    _serde_kind: ClassVar[str] = "opgraph.DenseElementsAttr"

    def to_json(self) -> dict[str, Any]:
        return {"values": serde.to_json(self.values), "type": serde.to_json(self.type)}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> DenseElementsAttr:
        return cls(serde.from_json(data["values"]), serde.from_json(data["type"]))
