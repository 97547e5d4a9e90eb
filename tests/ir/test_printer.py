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

"""Tests for the textual IR printer."""

from opgraph.ir.graph import create_module
from opgraph.ir.printer import IRPrinter, format_ir
from opgraph.ir.typing import f32, i32


def _add_module():
    module = create_module()
    body = module.body
    x = body.add_argument(i32)
    (y,) = body.add_op("arith.addi", [x, x])
    body.add_op("func.return", [y], output_types=[])
    return module


def test_simple_module():
    expected = "\n".join(
        [
            "builtin.module() {",
            "  region 0 {",
            "    ^bb0(%arg0: i32):",
            "      %0 = arith.addi(%arg0, %arg0) : i32",
            "      func.return(%0)",
            "  }",
            "}",
        ]
    )
    assert format_ir(_add_module()) == expected


def test_successors_and_attrs(cfg_module):
    text = format_ir(cfg_module)
    assert "func.func() {sym_name='main'} {" in text
    assert "%0 = arith.constant() {value=1.0} : f32" in text
    assert "cf.cond_br(%arg0, %0) [^bb1, ^bb2]" in text
    assert "cf.br(%0) [^bb2]" in text
    assert "^bb2(%arg0: f32):" in text


def test_hide_types_and_attrs(cfg_module):
    text = IRPrinter(show_types=False, show_attrs=False).format(cfg_module)
    assert "func.func() {" in text
    assert "%0 = arith.constant()" in text
    assert ": f32" not in text
    assert "^bb2(%arg0):" in text


def test_multiple_results():
    module = create_module()
    body = module.body
    x = body.add_argument(f32)
    body.add_op("test.split", [x], output_types=[f32, i32])
    assert "[%0, %1] = test.split(%arg0) : (f32, i32)" in format_ir(module)


def test_indent_size():
    text = IRPrinter(indent_size=4).format(_add_module())
    assert text.splitlines()[1] == "    region 0 {"
