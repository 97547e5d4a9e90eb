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

"""Tests for JSON serialization of types, attributes and IR."""

import numpy as np
import pytest

from opgraph.export.walker import to_dot
from opgraph.ir import serde
from opgraph.ir.attributes import DenseElementsAttr
from opgraph.ir.graph import Operation
from opgraph.ir.printer import format_ir
from opgraph.ir.typing import Tensor, f32

# ==============================================================================
# --- Primitives and containers
# ==============================================================================


class TestPrimitives:
    @pytest.mark.parametrize("obj", [None, True, 0, -7, 1.5, "text", [1, "a"], {"k": 2}])
    def test_roundtrip(self, obj):
        assert serde.from_json(serde.to_json(obj)) == obj

    def test_tuple_stays_tuple(self):
        assert serde.from_json(serde.to_json((1, 2))) == (1, 2)

    def test_bool_is_not_int(self):
        assert serde.to_json(True)["_kind"] == "_bool"

    def test_numpy_scalars(self):
        assert serde.from_json(serde.to_json(np.int64(3))) == 3
        assert serde.from_json(serde.to_json(np.float32(0.5))) == 0.5

    def test_ndarray(self):
        arr = np.arange(6, dtype=np.int16).reshape(2, 3)
        restored = serde.from_json(serde.to_json(arr))
        assert restored.dtype == np.int16
        np.testing.assert_array_equal(restored, arr)

    def test_non_string_keys_rejected(self):
        with pytest.raises(TypeError):
            serde.to_json({1: "a"})

    def test_unknown_object_rejected(self):
        with pytest.raises(TypeError, match="Cannot serialize"):
            serde.to_json(object())

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown type kind"):
            serde.from_json({"_kind": "nope"})

    def test_missing_kind(self):
        with pytest.raises(ValueError, match="Missing"):
            serde.from_json({"v": 1})


class TestRegistry:
    def test_registered_classes(self):
        assert serde.get_registered_class("opgraph.Operation") is Operation
        assert serde.get_registered_class("opgraph.DenseElementsAttr") is DenseElementsAttr
        assert serde.get_registered_class("missing") is None

    def test_register_requires_kind(self):
        class NoKind:
            pass

        with pytest.raises(ValueError, match="_serde_kind"):
            serde.register_class(NoKind)

    def test_duplicate_kind(self):
        class Clash:
            _serde_kind = "opgraph.Operation"

        with pytest.raises(ValueError, match="Duplicate"):
            serde.register_class(Clash)

    def test_dense_attr_roundtrip(self):
        attr = DenseElementsAttr.splat(2.0, Tensor[f32, (64, 64)])
        restored = serde.from_json(serde.to_json(attr))
        assert restored == attr
        assert restored.is_splat


# ==============================================================================
# --- Operations
# ==============================================================================


class TestOperationRoundtrip:
    def test_cfg_module_roundtrip(self, cfg_module):
        restored = serde.loads(serde.dumps(cfg_module))
        assert format_ir(restored) == format_ir(cfg_module)
        assert to_dot(restored) == to_dot(cfg_module)

    def test_successors_are_restored(self, cfg_module):
        restored = serde.loads(serde.dumps(cfg_module))
        region = restored.body.operations[0].regions[0]
        bb0, bb1, bb2 = region.blocks
        assert bb0.successors == [bb1, bb2]
        assert bb1.successors == [bb2]

    def test_use_def_chains_are_restored(self, chain_module):
        restored = serde.loads(serde.dumps(chain_module))
        a, b, c = restored.body.operations
        assert b.inputs[0] is a.outputs[0]
        assert b in a.outputs[0].uses
        assert c.parent_op is restored

    def test_constants_roundtrip(self, constants_module):
        restored = serde.loads(serde.dumps(constants_module))
        first = restored.body.operations[0].attrs["value"]
        assert isinstance(first, DenseElementsAttr)
        assert first.is_splat
        np.testing.assert_array_equal(
            restored.body.operations[2].attrs["value"], np.array([1, 2, 3])
        )

    def test_use_before_definition(self, chain_module):
        a, b, _ = chain_module.body.operations
        chain_module.body.operations[:2] = [b, a]
        with pytest.raises(ValueError, match="before its definition"):
            serde.to_json(chain_module)


# ==============================================================================
# --- Files
# ==============================================================================


class TestFiles:
    @pytest.mark.parametrize("compress", [False, True])
    def test_dump_and_load(self, tmp_path, cfg_module, compress):
        path = tmp_path / "module.json"
        serde.dump(cfg_module, path, compress=compress)
        raw = path.read_bytes()
        assert (raw[:2] == b"\x1f\x8b") == compress
        assert format_ir(serde.load(path)) == format_ir(cfg_module)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid IR JSON"):
            serde.load(path)
