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
Logging configuration for opgraph.

opgraph is a library first: its package logger carries a NullHandler until an
application opts in, so exporting a graph never prints anything by default.

Example usage:
    >>> import opgraph
    >>> opgraph.setup_logging(level="DEBUG")
    >>> opgraph.setup_logging(level="INFO", filename="opgraph.log", stream=False)
"""

import logging
import sys
from typing import Any, Literal

OPGRAPH_LOGGER_NAME = "opgraph"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _package_logger() -> logging.Logger:
    return logging.getLogger(OPGRAPH_LOGGER_NAME)


def _only_null_handler(logger: logging.Logger) -> bool:
    return len(logger.handlers) == 1 and isinstance(
        logger.handlers[0], logging.NullHandler
    )


def _clear_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: LogLevel = "INFO",
    format: str | None = None,
    date_format: str | None = None,
    filename: str | None = None,
    stream: Any = None,
    force: bool = False,
    propagate: bool = False,
) -> None:
    """
    Route ``opgraph`` log records somewhere visible.

    Args:
        level: Level name for the package logger and the new handlers.
        format: Record format; DEFAULT_FORMAT if None.
        date_format: ``asctime`` format; DEFAULT_DATE_FORMAT if None.
        filename: Also append records to this file.
        stream: Target stream, sys.stderr if None. False disables stream output.
        force: Drop existing handlers first.
        propagate: Hand records on to the root logger as well. Without a
            filename or stream, no handler of our own is installed.
    """
    logger = _package_logger()
    numeric_level = logging.getLevelName(level.upper())
    logger.setLevel(numeric_level)

    # The library-mode NullHandler only matters while nothing else is attached.
    if force or (propagate and _only_null_handler(logger)):
        _clear_handlers(logger)
    logger.propagate = propagate
    if propagate and filename is None and stream is None:
        return

    handlers: list[logging.Handler] = []
    if stream is not False:
        handlers.append(logging.StreamHandler(sys.stderr if stream is None else stream))
    if filename:
        handlers.append(logging.FileHandler(filename))

    formatter = logging.Formatter(
        format or DEFAULT_FORMAT, datefmt=date_format or DEFAULT_DATE_FORMAT
    )
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def disable_logging() -> None:
    """Return to library mode: a lone NullHandler and no propagation."""
    logger = _package_logger()
    _clear_handlers(logger)
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Logger for `name`, moved under the ``opgraph`` hierarchy if needed.

    Example:
        >>> get_logger("opgraph.export.walker").name
        'opgraph.export.walker'
        >>> get_logger("plugin").name
        'opgraph.plugin'
    """
    prefix = OPGRAPH_LOGGER_NAME + "."
    if name == OPGRAPH_LOGGER_NAME or name.startswith(prefix):
        return logging.getLogger(name)
    return logging.getLogger(prefix + name)


if not _package_logger().handlers:
    disable_logging()
