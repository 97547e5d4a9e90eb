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

"""Textual dump of the opgraph IR.

    builtin.module() {
      region 0 {
        ^bb0(%arg0: i32):
          %0 = arith.addi(%arg0, %arg0) : i32
          cf.br(%0) [^bb1]
      }
    }
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from opgraph.ir.graph import Block, Operation, Value


class IRPrinter:
    """Format IR in a readable, MLIR-like style."""

    def __init__(
        self,
        *,
        indent_size: int = 2,
        show_types: bool = True,
        show_attrs: bool = True,
    ):
        self.indent_size = indent_size
        self.show_types = show_types
        self.show_attrs = show_attrs

    def format(self, op: Operation) -> str:
        return "\n".join(
            " " * (depth * self.indent_size) + text
            for depth, text in self._op_lines(op, 0)
        )

    def _op_lines(self, op: Operation, depth: int) -> Iterator[tuple[int, str]]:
        head = (
            f"{self._results(op.outputs)}{op.opcode}"
            f"({', '.join(v.name for v in op.inputs)})"
            f"{self._successors(op.successors)}"
            f"{self._attrs(op.attrs)}"
            f"{self._result_types(op.outputs)}"
        )
        if not op.regions:
            yield depth, head
            return
        yield depth, head + " {"
        for index, region in enumerate(op.regions):
            yield depth + 1, f"region {index} {{"
            for block in region.blocks:
                yield from self._block_lines(block, depth + 2)
            yield depth + 1, "}"
        yield depth, "}"

    def _block_lines(self, block: Block, depth: int) -> Iterator[tuple[int, str]]:
        params = ""
        if block.arguments:
            params = "(" + ", ".join(map(self._param, block.arguments)) + ")"
        yield depth, f"{block.label}{params}:"
        for op in block.operations:
            yield from self._op_lines(op, depth + 1)

    def _param(self, value: Value) -> str:
        return f"{value.name}: {value.type}" if self.show_types else value.name

    @staticmethod
    def _results(outputs: list[Value]) -> str:
        names = [v.name for v in outputs]
        if not names:
            return ""
        lhs = names[0] if len(names) == 1 else f"[{', '.join(names)}]"
        return f"{lhs} = "

    @staticmethod
    def _successors(successors: list[Block]) -> str:
        if not successors:
            return ""
        return f" [{', '.join(b.label for b in successors)}]"

    def _attrs(self, attrs: dict[str, Any]) -> str:
        if not (self.show_attrs and attrs):
            return ""
        return " {" + ", ".join(f"{k}={attrs[k]!r}" for k in sorted(attrs)) + "}"

    def _result_types(self, outputs: list[Value]) -> str:
        if not (self.show_types and outputs):
            return ""
        types = [str(v.type) for v in outputs]
        return f" : {types[0]}" if len(types) == 1 else f" : ({', '.join(types)})"


def format_ir(op: Operation, **kwargs: Any) -> str:
    """Shorthand for ``IRPrinter(**kwargs).format(op)``."""
    return IRPrinter(**kwargs).format(op)
