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

import logging

import numpy as np
import pytest

from opgraph.ir.attributes import DenseElementsAttr
from opgraph.ir.graph import Operation, Region, create_module
from opgraph.ir.typing import Tensor, f32, i1, i32
from opgraph.logging_config import OPGRAPH_LOGGER_NAME, disable_logging


@pytest.fixture(autouse=True)
def quiet_opgraph_logger():
    """Put the package logger back into library mode after each test."""
    yield
    disable_logging()
    logging.getLogger(OPGRAPH_LOGGER_NAME).setLevel(logging.NOTSET)


@pytest.fixture
def chain_module() -> Operation:
    """Module whose body runs test.a -> test.b -> test.c."""
    module = create_module()
    body = module.body
    (a,) = body.add_op("test.a", [], output_types=[i32])
    (b,) = body.add_op("test.b", [a])
    body.add_op("test.c", [b])
    return module


@pytest.fixture
def cfg_module() -> Operation:
    """Module holding a function with a three block CFG.

    ^bb0: cond_br -> ^bb1, ^bb2
    ^bb1: br -> ^bb2
    ^bb2(%arg0): return
    """
    region = Region()
    bb0 = region.add_block([i1])
    bb1 = region.add_block()
    bb2 = region.add_block([f32])
    (c,) = bb0.add_op("arith.constant", [], output_types=[f32], attrs={"value": 1.0})
    bb0.add_op(
        "cf.cond_br", [bb0.arguments[0], c], output_types=[], successors=[bb1, bb2]
    )
    (d,) = bb1.add_op("arith.negf", [c])
    bb1.add_op("cf.br", [d], output_types=[], successors=[bb2])
    bb2.add_op("func.return", [bb2.arguments[0]], output_types=[])

    module = create_module()
    module.body.append(
        Operation(
            opcode="func.func",
            inputs=[],
            outputs=[],
            attrs={"sym_name": "main"},
            regions=[region],
        )
    )
    return module


@pytest.fixture
def constants_module() -> Operation:
    """Module with splat, small and large constant attributes."""
    module = create_module()
    body = module.body
    body.add_op(
        "arith.constant",
        [],
        output_types=[Tensor[f32, (512, 512)]],
        attrs={"value": DenseElementsAttr.splat(0.0, Tensor[f32, (512, 512)])},
    )
    body.add_op(
        "arith.constant",
        [],
        output_types=[Tensor[i32, (8, 8)]],
        attrs={"value": np.arange(64, dtype=np.int32).reshape(8, 8)},
    )
    body.add_op(
        "arith.constant",
        [],
        output_types=[Tensor[i32, (3,)]],
        attrs={"value": np.array([1, 2, 3], dtype=np.int32)},
    )
    return module
