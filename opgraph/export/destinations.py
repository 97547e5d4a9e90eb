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

"""Where exported DOT text goes: a file (or stdout) or a Graphviz viewer."""

from __future__ import annotations

import io
import sys
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, TextIO

import graphviz

from opgraph.export.model import GraphModel
from opgraph.export.options import ExportOptions
from opgraph.export.walker import GraphWalker
from opgraph.logging_config import get_logger

logger = get_logger(__name__)


class GraphDestination(ABC):
    """A place the exporter can stream DOT text into."""

    @abstractmethod
    def open(self) -> AbstractContextManager[TextIO]:
        """Return a context manager yielding a writable text stream."""


class FileDestination(GraphDestination):
    """Write to `path`; ``"-"`` or None means standard output."""

    def __init__(self, path: str | Path | None = None):
        self.path = None if path in (None, "-") else Path(path)

    @contextmanager
    def open(self) -> Iterator[TextIO]:
        if self.path is None:
            yield sys.stdout
            sys.stdout.flush()
            return
        with open(self.path, "w", encoding="utf-8") as f:
            yield f
        logger.info("Wrote %s", self.path)


class ViewerDestination(GraphDestination):
    """Render with Graphviz and open the result in the system viewer.

    Args:
        name: Base name of the generated ``.gv`` source file.
        format: Output format passed to Graphviz (``svg``, ``pdf``, ``png``).
        directory: Where to put the files; a fresh temporary directory if None.
        cleanup: Delete the ``.gv`` source after rendering.
    """

    def __init__(
        self,
        name: str = "graph",
        *,
        format: str = "svg",
        directory: str | Path | None = None,
        cleanup: bool = False,
    ):
        self.name = name
        self.format = format
        self.directory = directory
        self.cleanup = cleanup

    @contextmanager
    def open(self) -> Iterator[TextIO]:
        buffer = io.StringIO()
        yield buffer
        directory = self.directory or tempfile.mkdtemp(prefix="opgraph-")
        source = graphviz.Source(
            buffer.getvalue(),
            filename=f"{self.name}.gv",
            directory=directory,
            format=self.format,
        )
        rendered = source.view(cleanup=self.cleanup)
        logger.info("Opened %s", rendered)


def write_graph(
    root: Any,
    destination: GraphDestination | None = None,
    options: ExportOptions | None = None,
    model: GraphModel | None = None,
) -> None:
    """Export `root` to `destination` (stdout by default)."""
    destination = destination or FileDestination()
    with destination.open() as stream:
        GraphWalker(stream, options, model).export_graph(root)


def write_region_cfg(
    region: Any,
    destination: GraphDestination | None = None,
    options: ExportOptions | None = None,
    model: GraphModel | None = None,
) -> None:
    """Export the control-flow graph of `region` to `destination`."""
    destination = destination or FileDestination()
    with destination.open() as stream:
        GraphWalker(stream, options, model).emit_region_cfg(region)


def view_graph(region: Any, name: str = "region", **viewer_kwargs: Any) -> None:
    """Show the control-flow graph of `region` in a viewer window."""
    write_region_cfg(region, ViewerDestination(name, **viewer_kwargs))
