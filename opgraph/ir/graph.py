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
Structured IR: Operations in Blocks in Regions, SSA Values throughout.

Key Design Principles:
----------------------
1. **Nesting**: an Operation owns Regions, a Region owns an ordered list of
   Blocks, a Block owns block arguments and an ordered list of Operations.
2. **SSA Form**: each value is defined once, by an operation result or a block
   argument; use-def chains are explicit.
3. **Explicit CFG**: the last operation of a block (its terminator) may name
   successor blocks in the same region.
4. **Parent Links**: every operation, block and region knows its parent, so
   the enclosing scope of any operation can be found without a side table.

Example:
--------
    from opgraph.ir.graph import create_module
    from opgraph.ir.typing import Tensor, f32

    module = create_module()
    body = module.body

    x = body.add_argument(Tensor[f32, (10,)])
    (y,) = body.add_op("math.exp", [x])
    (z,) = body.add_op("arith.addf", [x, y])
    body.add_op("func.return", [z], output_types=[])
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from opgraph.ir import serde
from opgraph.ir.typing import BaseType


@dataclass(eq=False)
class Value:
    """An SSA value: one operation result or one block argument.

    Values compare and hash by identity; two values with the same name in
    different blocks are unrelated.

    Attributes:
        name: Printable SSA name, e.g. ``%0`` or ``%arg1``
        type: Type of this value
        defining_op: Producing operation; None for block arguments
        uses: Consuming operations, in first-use order
    """

    name: str
    type: BaseType
    defining_op: Operation | None = None
    uses: dict[Operation, None] = field(default_factory=dict, repr=False)

    def __repr__(self) -> str:
        return f"Value({self.name}: {self.type})"

    def __str__(self) -> str:
        return self.name

    def add_use(self, op: Operation) -> None:
        self.uses.setdefault(op, None)


@serde.register_class
@dataclass(eq=False)
class Operation:
    """One operation, possibly owning nested regions.

    Attributes:
        opcode: Dialect-qualified name, e.g. ``arith.addi`` or ``scf.for``
        inputs: Operand values
        outputs: Result values
        attrs: Named attributes, kept in insertion order
        regions: Nested regions
        successors: Successor blocks (terminators only)
        name: Optional debug name
        parent: Block containing this operation
    """

    opcode: str
    inputs: list[Value]
    outputs: list[Value]
    attrs: dict[str, Any] = field(default_factory=dict)
    regions: list[Region] = field(default_factory=list)
    successors: list[Block] = field(default_factory=list)
    name: str = ""
    parent: Block | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for result in self.outputs:
            result.defining_op = self
        for operand in self.inputs:
            operand.add_use(self)
        for region in self.regions:
            if region.parent is not None and region.parent is not self:
                raise ValueError(f"Region already attached to {region.parent.opcode}")
            region.parent = self

    def __repr__(self) -> str:
        ins = ", ".join(map(str, self.inputs))
        outs = ", ".join(map(str, self.outputs))
        return f"Operation({self.opcode}({ins}) -> [{outs}])"

    @property
    def body(self) -> Block:
        """First block of the first region."""
        if not self.regions or not self.regions[0].blocks:
            raise ValueError(f"{self.opcode} has no body block")
        return self.regions[0].blocks[0]

    @property
    def parent_op(self) -> Operation | None:
        """Operation whose region contains this operation."""
        if self.parent is None:
            return None
        return self.parent.parent_op

    # =========================================================================
    # Serialization
    # =========================================================================

    _serde_kind: ClassVar[str] = "opgraph.Operation"

    def to_json(self) -> dict[str, Any]:
        keys: dict[Value, str] = {}

        def _key(value: Value) -> str:
            if value not in keys:
                keys[value] = f"v{len(keys)}"
            return keys[value]

        def _value_def(value: Value) -> dict[str, Any]:
            return {
                "key": _key(value),
                "name": value.name,
                "type": serde.to_json(value.type),
            }

        def _op_to_json(op: Operation) -> dict[str, Any]:
            inputs = []
            for v in op.inputs:
                if v not in keys:
                    raise ValueError(
                        f"{op.opcode} uses {v.name} before its definition"
                    )
                inputs.append(keys[v])
            return {
                "opcode": op.opcode,
                "name": op.name,
                "inputs": inputs,
                "outputs": [_value_def(v) for v in op.outputs],
                "attrs": {k: serde.to_json(v) for k, v in op.attrs.items()},
                "regions": [_region_to_json(r) for r in op.regions],
                "successors": [s.index for s in op.successors],
            }

        def _region_to_json(region: Region) -> dict[str, Any]:
            # Arguments of all blocks first: branches may reach forward.
            blocks = [
                {"arguments": [_value_def(a) for a in block.arguments]}
                for block in region.blocks
            ]
            for data, block in zip(blocks, region.blocks, strict=True):
                data["operations"] = [_op_to_json(op) for op in block.operations]
            return {"blocks": blocks}

        return _op_to_json(self)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Operation:
        values: dict[str, Value] = {}

        def _define(block: Block | None, d: dict[str, Any]) -> Value:
            if d["key"] in values:
                raise ValueError(f"Value key {d['key']} defined twice")
            type_ = serde.from_json(d["type"])
            if block is None:
                value = Value(d["name"], type_)
            else:
                value = block.add_argument(type_, name=d["name"])
            values[d["key"]] = value
            return value

        def _lookup(key: str) -> Value:
            if key not in values:
                raise ValueError(f"Unknown value key {key}")
            return values[key]

        def _op_from_json(d: dict[str, Any], region_blocks: list[Block]) -> Operation:
            regions = [_region_from_json(r) for r in d.get("regions", [])]
            successors = []
            for index in d.get("successors", []):
                if not 0 <= index < len(region_blocks):
                    raise ValueError(f"Successor index {index} out of range")
                successors.append(region_blocks[index])
            return cls(
                opcode=d["opcode"],
                inputs=[_lookup(k) for k in d["inputs"]],
                outputs=[_define(None, o) for o in d["outputs"]],
                attrs={k: serde.from_json(v) for k, v in d.get("attrs", {}).items()},
                regions=regions,
                successors=successors,
                name=d.get("name", ""),
            )

        def _region_from_json(d: dict[str, Any]) -> Region:
            region = Region()
            blocks = []
            for block_data in d["blocks"]:
                block = region.add_block()
                for arg in block_data["arguments"]:
                    _define(block, arg)
                blocks.append(block)
            for block, block_data in zip(blocks, d["blocks"], strict=True):
                for op_data in block_data["operations"]:
                    block.append(_op_from_json(op_data, blocks))
            return region

        return _op_from_json(data, [])


class Block:
    """Ordered list of operations plus block arguments.

    Example:
        block = region.add_block()
        n = block.add_argument(i32)
        (m,) = block.add_op("arith.muli", [n, n])
    """

    def __init__(self) -> None:
        self.arguments: list[Value] = []
        self.operations: list[Operation] = []
        self.values: dict[str, Value] = {}
        self.parent: Region | None = None
        self._next_id = itertools.count()

    def _fresh_name(self) -> str:
        return next(n for n in (f"%{i}" for i in self._next_id) if n not in self.values)

    def _register(self, value: Value) -> None:
        existing = self.values.setdefault(value.name, value)
        if existing is not value:
            raise ValueError(f"Value {value.name} already exists")

    def add_argument(self, type: BaseType, name: str | None = None) -> Value:
        value = Value(name or f"%arg{len(self.arguments)}", type)
        self._register(value)
        self.arguments.append(value)
        return value

    def append(self, op: Operation) -> Operation:
        """Attach an already constructed operation at the end of the block."""
        if op.parent is not None:
            raise ValueError(f"{op.opcode} already belongs to a block")
        for result in op.outputs:
            self._register(result)
        op.parent = self
        self.operations.append(op)
        return op

    def add_op(
        self,
        opcode: str,
        inputs: list[Value],
        output_types: Sequence[BaseType] | None = None,
        attrs: dict[str, Any] | None = None,
        regions: list[Region] | None = None,
        successors: list[Block] | None = None,
    ) -> list[Value]:
        """Build an operation at the end of the block and return its results.

        With `output_types` left as None, the op gets one result typed like its
        first operand.
        """
        if output_types is None:
            if not inputs:
                raise ValueError(f"Cannot infer type for {opcode} with no inputs")
            output_types = [inputs[0].type]

        op = Operation(
            opcode,
            list(inputs),
            [Value(self._fresh_name(), t) for t in output_types],
            attrs=dict(attrs or {}),
            regions=list(regions or []),
            successors=list(successors or []),
        )
        return self.append(op).outputs

    @property
    def terminator(self) -> Operation | None:
        return self.operations[-1] if self.operations else None

    @property
    def successors(self) -> list[Block]:
        """Successor blocks named by the terminator."""
        term = self.terminator
        return list(term.successors) if term is not None else []

    @property
    def parent_op(self) -> Operation | None:
        if self.parent is None:
            return None
        return self.parent.parent

    @property
    def index(self) -> int:
        """Position of this block in its region."""
        if self.parent is None:
            return 0
        return self.parent.blocks.index(self)

    @property
    def label(self) -> str:
        return f"^bb{self.index}"

    def __repr__(self) -> str:
        return f"Block({self.label}: {len(self.operations)} ops)"


class Region:
    """Ordered list of blocks forming one nested scope."""

    def __init__(self, blocks: list[Block] | None = None) -> None:
        self.blocks: list[Block] = []
        self.parent: Operation | None = None
        for block in blocks or []:
            self.append(block)

    def append(self, block: Block) -> Block:
        if block.parent is not None:
            raise ValueError("Block already belongs to a region")
        block.parent = self
        self.blocks.append(block)
        return block

    def add_block(self, arg_types: Sequence[BaseType] = ()) -> Block:
        """Create a new block at the end of the region."""
        block = self.append(Block())
        for t in arg_types:
            block.add_argument(t)
        return block

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __repr__(self) -> str:
        return f"Region({len(self.blocks)} blocks)"


def create_module(opcode: str = "builtin.module") -> Operation:
    """Return a top-level operation holding one region with one empty block."""
    region = Region()
    region.add_block()
    return Operation(opcode=opcode, inputs=[], outputs=[], regions=[region])
