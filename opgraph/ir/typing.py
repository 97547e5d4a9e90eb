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

"""
Type system for the opgraph IR.

Scalars (integers and floats) and ranked tensors of scalars are enough to
describe values in an exported graph. Types print in the same notation used
to build them:

    Tensor[f32, (2, 3)]     # static 2-D tensor
    Tensor[i64, (-1)]       # 1-D tensor with dynamic size
    Tensor[i1, ()]          # 0-D tensor

All types are immutable, hashable and registered with `opgraph.ir.serde`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np

from opgraph.ir import serde


class BaseType:
    """Base class for all opgraph types."""

    def __repr__(self) -> str:
        return str(self)


class ScalarType(BaseType):
    """Common parent of IntegerType and FloatType."""


@serde.register_class
@dataclass(frozen=True, repr=False)
class IntegerType(ScalarType):
    """Fixed-width integer, printed ``i<bits>`` or ``u<bits>``."""

    bitwidth: int = 32
    signed: bool = True

    _serde_kind: ClassVar[str] = "opgraph.IntegerType"

    def __post_init__(self) -> None:
        # i1 is the boolean type
        if self.bitwidth not in (1, 8, 16, 32, 64, 128):
            raise ValueError(f"Unsupported integer bitwidth {self.bitwidth}")

    def __str__(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bitwidth}"

    def to_json(self) -> dict[str, Any]:
        return {"bitwidth": self.bitwidth, "signed": self.signed}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> IntegerType:
        return cls(bitwidth=data["bitwidth"], signed=data["signed"])


@serde.register_class
@dataclass(frozen=True, repr=False)
class FloatType(ScalarType):
    """IEEE 754 float, printed ``f16``, ``f32`` or ``f64``."""

    bitwidth: int = 32

    _serde_kind: ClassVar[str] = "opgraph.FloatType"

    def __post_init__(self) -> None:
        if self.bitwidth not in (16, 32, 64):
            raise ValueError(f"Unsupported float bitwidth {self.bitwidth}")

    def __str__(self) -> str:
        return f"f{self.bitwidth}"

    def to_json(self) -> dict[str, Any]:
        return {"bitwidth": self.bitwidth}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> FloatType:
        return cls(bitwidth=data["bitwidth"])


i1 = IntegerType(1)
i8, i16, i32, i64 = (IntegerType(w) for w in (8, 16, 32, 64))
u8, u16, u32, u64 = (IntegerType(w, signed=False) for w in (8, 16, 32, 64))
f16, f32, f64 = (FloatType(w) for w in (16, 32, 64))


@serde.register_class
@dataclass(frozen=True, repr=False)
class TensorType(BaseType):
    """Ranked tensor of a scalar element type.

    ``shape`` entries are non-negative sizes, or -1 for a dynamic dimension.
    """

    element_type: BaseType
    shape: tuple[int, ...]

    _serde_kind: ClassVar[str] = "opgraph.TensorType"

    def __post_init__(self) -> None:
        if not isinstance(self.element_type, BaseType):
            raise TypeError(
                f"Element type must be an opgraph type, got {self.element_type!r}"
            )
        if not isinstance(self.shape, tuple):
            raise TypeError(f"Shape must be a tuple, got {type(self.shape).__name__}")
        for dim in self.shape:
            if isinstance(dim, bool) or not isinstance(dim, int):
                raise TypeError(f"Dimension {dim!r} is not an integer")
            if dim < -1:
                raise ValueError(f"Dimension {dim} must be >= 0, or -1 for dynamic")

    def __class_getitem__(cls, params: Any) -> TensorType:
        """``Tensor[element_type, shape]``"""
        if not (isinstance(params, tuple) and len(params) == 2):
            raise TypeError("Use Tensor[element_type, shape]")
        return cls(*params)

    def __str__(self) -> str:
        dims = ", ".join(map(str, self.shape))
        return f"Tensor[{self.element_type}, ({dims})]"

    @property
    def rank(self) -> int:
        return len(self.shape)

    @property
    def is_fully_static(self) -> bool:
        return -1 not in self.shape

    @property
    def num_elements(self) -> int:
        """Static element count; raises for dynamic shapes."""
        if not self.is_fully_static:
            raise ValueError(f"{self} has dynamic dimensions")
        return math.prod(self.shape)

    def to_json(self) -> dict[str, Any]:
        return {"element_type": serde.to_json(self.element_type), "shape": list(self.shape)}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> TensorType:
        return cls(serde.from_json(data["element_type"]), tuple(data["shape"]))


Tensor = TensorType


def scalar_type_from_dtype(dtype: Any) -> ScalarType:
    """Map a numpy dtype onto the matching scalar type."""
    dtype = np.dtype(dtype)
    bits = dtype.itemsize * 8
    if dtype.kind == "b":
        return i1
    if dtype.kind in "iu":
        return IntegerType(bits, signed=dtype.kind == "i")
    if dtype.kind == "f":
        return FloatType(bits)
    raise TypeError(f"Unsupported numpy dtype: {dtype}")
