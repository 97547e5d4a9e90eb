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

"""The structured IR consumed by the exporter.

Downstream code can simply write::

    import opgraph.ir as ir
    import opgraph.ir.typing as irt
"""

from __future__ import annotations

from . import serde as serde
from . import typing as typing
from .attributes import DenseElementsAttr
from .graph import Block, Operation, Region, Value, create_module
from .printer import IRPrinter, format_ir
from .typing import FloatType, IntegerType, ScalarType, Tensor, TensorType

__all__ = [
    "Block",
    "DenseElementsAttr",
    "FloatType",
    "IRPrinter",
    "IntegerType",
    "Operation",
    "Region",
    "ScalarType",
    "Tensor",
    "TensorType",
    "Value",
    "create_module",
    "format_ir",
    "serde",
    "typing",
]
