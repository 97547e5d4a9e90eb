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

"""Read-only view of an IR, as seen by the exporter.

The walker never touches IR objects directly; it asks a `GraphModel`. Any
structured IR with operations, blocks and regions can be exported by
implementing this protocol. `IRGraphModel` is the implementation for
`opgraph.ir`.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Any, Protocol, runtime_checkable

from opgraph.ir.graph import Block, Operation, Region, Value


@runtime_checkable
class GraphModel(Protocol):
    """Capabilities the exporter needs from an IR. All sequences are ordered."""

    def regions_of(self, op: Any) -> Sequence[Any]: ...

    def blocks_of(self, region: Any) -> Sequence[Any]: ...

    def operations_of(self, block: Any) -> Sequence[Any]: ...

    def arguments_of(self, block: Any) -> Sequence[Hashable]: ...

    def operands_of(self, op: Any) -> Sequence[Hashable]: ...

    def results_of(self, op: Any) -> Sequence[Hashable]: ...

    def successors_of(self, block: Any) -> Sequence[Any]: ...

    def users_of(self, value: Hashable) -> Sequence[Any]: ...

    def enclosing_operation(self, op: Any) -> Any | None: ...

    def operation_name(self, op: Any) -> str: ...

    def block_name(self, block: Any) -> str: ...

    def value_name(self, value: Hashable) -> str: ...

    def result_types_of(self, op: Any) -> Sequence[Any]: ...

    def attributes_of(self, op: Any) -> Sequence[tuple[str, Any]]: ...

    def is_outermost_block(self, block: Any) -> bool: ...


class IRGraphModel:
    """`GraphModel` over `opgraph.ir` objects."""

    def regions_of(self, op: Operation) -> Sequence[Region]:
        return op.regions

    def blocks_of(self, region: Region) -> Sequence[Block]:
        return region.blocks

    def operations_of(self, block: Block) -> Sequence[Operation]:
        return block.operations

    def arguments_of(self, block: Block) -> Sequence[Value]:
        return block.arguments

    def operands_of(self, op: Operation) -> Sequence[Value]:
        return op.inputs

    def results_of(self, op: Operation) -> Sequence[Value]:
        return op.outputs

    def successors_of(self, block: Block) -> Sequence[Block]:
        return block.successors

    def users_of(self, value: Value) -> Sequence[Operation]:
        return list(value.uses)

    def enclosing_operation(self, op: Operation) -> Operation | None:
        return op.parent_op

    def operation_name(self, op: Operation) -> str:
        return op.opcode

    def block_name(self, block: Block) -> str:
        return block.label

    def value_name(self, value: Value) -> str:
        return value.name

    def result_types_of(self, op: Operation) -> Sequence[Any]:
        return [v.type for v in op.outputs]

    def attributes_of(self, op: Operation) -> Sequence[tuple[str, Any]]:
        return list(op.attrs.items())

    def is_outermost_block(self, block: Block) -> bool:
        """True for blocks not nested inside any other block."""
        parent_op = block.parent_op
        return parent_op is None or parent_op.parent is None
