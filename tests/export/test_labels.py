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

"""Tests for node and cluster label formatting."""

import numpy as np
import pytest

from opgraph.export.labels import LabelFormatter
from opgraph.export.options import ExportOptions
from opgraph.ir.attributes import DenseElementsAttr
from opgraph.ir.graph import create_module
from opgraph.ir.typing import Tensor, f32, i32


def _op(opcode="test.op", output_types=(i32,), attrs=None):
    body = create_module().body
    body.add_op(opcode, [], output_types=list(output_types), attrs=attrs)
    return body.operations[-1]


class TestFormatOperation:
    def test_name_and_types(self):
        labels = LabelFormatter()
        assert labels.format_operation(_op()) == "test.op : (i32)"
        assert labels.format_operation(_op(output_types=())) == "test.op : ()"
        assert (
            labels.format_operation(_op(output_types=(i32, f32)))
            == "test.op : (i32, f32)"
        )

    def test_attributes_one_per_line(self):
        op = _op(attrs={"value": 1.0, "sym_name": "main"})
        assert LabelFormatter().format_operation(op) == (
            "test.op : (i32)\nvalue: 1.0\nsym_name: main"
        )

    def test_toggles(self):
        op = _op(attrs={"value": 1})
        labels = LabelFormatter(
            ExportOptions(print_result_types=False, print_attrs=False)
        )
        assert labels.format_operation(op) == "test.op"

    def test_first_line_is_truncated_as_a_whole(self):
        op = _op(
            opcode="dialect.long_operation_name",
            output_types=(Tensor[f32, (2, 3)], i32),
            attrs={"note": "abcdefghijklmnop"},
        )
        labels = LabelFormatter(ExportOptions(max_label_length=8))
        assert labels.format_operation(op) == "dialect....\nnote: abcdefgh..."

    @pytest.mark.parametrize(
        "limit, expected",
        [(10, "test.op : ..."), (15, "test.op : (i32)"), (80, "test.op : (i32)")],
    )
    def test_label_length_limit(self, limit, expected):
        labels = LabelFormatter(ExportOptions(max_label_length=limit))
        assert labels.format_operation(_op()) == expected

    def test_block_argument(self):
        assert LabelFormatter().format_block_argument(3) == "arg3"


class TestFormatAttribute:
    def test_splat_is_never_elided(self):
        attr = DenseElementsAttr.splat(0.0, Tensor[f32, (512, 512)])
        assert LabelFormatter().format_attribute(attr) == (
            "dense<0.0> : Tensor[f32, (512, 512)]"
        )

    def test_large_container_is_elided(self):
        attr = DenseElementsAttr.from_array(np.arange(64, dtype=np.int32).reshape(8, 8))
        assert LabelFormatter().format_attribute(attr) == (
            "[[...]] : Tensor[i32, (8, 8)]"
        )

    def test_numeric_arrays_are_element_containers(self):
        labels = LabelFormatter()
        assert labels.format_attribute(np.zeros((2, 3, 4), dtype=np.float32)) == (
            "dense<0.0> : Tensor[f32, (2, 3, 4)]"
        )
        assert labels.format_attribute(np.arange(20, dtype=np.int32)) == (
            "[...] : Tensor[i32, (20)]"
        )

    def test_small_container_prints_in_full(self):
        assert LabelFormatter().format_attribute(np.array([1, 2, 3], dtype=np.int32)) == (
            "dense<[1, 2, 3]> : Tensor[i32, (3)]"
        )

    @pytest.mark.parametrize(
        "threshold,expected",
        [(4, "dense<[1, 2, 3, 4]> : Tensor[i32, (4)]"), (3, "[...] : Tensor[i32, (4)]")],
    )
    def test_threshold_is_exclusive(self, threshold, expected):
        labels = LabelFormatter(
            ExportOptions(large_container_element_threshold=threshold)
        )
        assert labels.format_attribute(np.array([1, 2, 3, 4], dtype=np.int32)) == expected

    def test_long_lists(self):
        labels = LabelFormatter()
        assert labels.format_attribute(list(range(20))) == "[...]"
        assert labels.format_attribute((1, 2)) == "(1, 2)"

    def test_plain_values_are_truncated(self):
        labels = LabelFormatter(ExportOptions(max_label_length=4))
        assert labels.format_attribute("abcdefgh") == "abcd..."
        assert labels.format_attribute(True) == "True"
