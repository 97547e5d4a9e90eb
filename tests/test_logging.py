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

"""Tests for opgraph logging functionality."""

import io
import logging

import opgraph
from opgraph.export.options import ExportOptions
from opgraph.export.walker import to_dot
from opgraph.ir.graph import Region, create_module
from opgraph.ir.typing import i32


def test_logging_disabled_by_default():
    """Library mode: a lone NullHandler and no propagation."""
    logger = logging.getLogger("opgraph")
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
    assert not logger.propagate


def test_setup_logging_basic():
    log_stream = io.StringIO()
    opgraph.setup_logging(level="INFO", stream=log_stream, force=True)

    logging.getLogger("opgraph.test").info("Test message")

    log_output = log_stream.getvalue()
    assert "Test message" in log_output
    assert "INFO" in log_output


def test_setup_logging_levels():
    log_stream = io.StringIO()
    opgraph.setup_logging(level="WARNING", stream=log_stream, force=True)

    logger = logging.getLogger("opgraph.test")
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")

    log_output = log_stream.getvalue()
    assert "Debug message" not in log_output
    assert "Info message" not in log_output
    assert "Warning message" in log_output


def test_setup_logging_custom_format():
    log_stream = io.StringIO()
    opgraph.setup_logging(
        level="INFO", format="%(levelname)s|%(message)s", stream=log_stream, force=True
    )
    logging.getLogger("opgraph.test").info("Custom")
    assert log_stream.getvalue() == "INFO|Custom\n"


def test_setup_logging_to_file(tmp_path):
    log_file = tmp_path / "opgraph.log"
    opgraph.setup_logging(level="INFO", filename=str(log_file), stream=False, force=True)
    logging.getLogger("opgraph.test").info("File message")
    opgraph.disable_logging()
    assert "File message" in log_file.read_text()


def test_disable_logging():
    log_stream = io.StringIO()
    opgraph.setup_logging(level="INFO", stream=log_stream, force=True)
    opgraph.disable_logging()

    logging.getLogger("opgraph.test").info("Should not appear")
    assert log_stream.getvalue() == ""


def test_propagate_to_application(caplog):
    opgraph.setup_logging(level="DEBUG", propagate=True)
    logger = logging.getLogger("opgraph")
    assert logger.propagate
    assert not logger.handlers

    with caplog.at_level(logging.DEBUG):
        logging.getLogger("opgraph.test").debug("Propagated")
    assert "Propagated" in caplog.text


def test_get_logger():
    assert opgraph.get_logger("walker").name == "opgraph.walker"
    assert opgraph.get_logger("opgraph.export.walker").name == "opgraph.export.walker"
    assert opgraph.get_logger("opgraph").name == "opgraph"


def test_export_logs_at_debug(chain_module):
    log_stream = io.StringIO()
    opgraph.setup_logging(level="DEBUG", stream=log_stream, force=True)
    to_dot(chain_module)
    log_output = log_stream.getvalue()
    assert "Exporting builtin.module" in log_output
    assert "Wrote 5 nodes and 2 edges" in log_output


def test_condense_fallback_is_logged():
    region = Region()
    block = region.add_block()
    after = region.add_block()
    (x,) = block.add_op("test.first", [], output_types=[i32])
    (y,) = block.add_op("test.middle", [x])
    block.add_op("test.last", [x], output_types=[], successors=[after])
    after.add_op("test.use", [y], output_types=[])
    module = create_module()
    module.body.add_op("test.wrap", [], output_types=[], regions=[region])

    log_stream = io.StringIO()
    opgraph.setup_logging(level="DEBUG", stream=log_stream, force=True)
    to_dot(module, ExportOptions(condense_to_entry_and_exit_per_block=True))
    assert "Not condensing ^bb0: %1 is used by test.use" in log_stream.getvalue()
