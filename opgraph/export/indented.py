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

"""Text sink that indents every line it starts."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO


class IndentedWriter:
    """Append-only writer over a text stream.

    Indentation is inserted at the start of each non-empty line, so callers
    can write fragments and whole lines alike.

    Example:
        os = IndentedWriter(sys.stdout)
        os.write("digraph G {\\n")
        with os.indented():
            os.write("compound = true;\\n")
        os.write("}\\n")
    """

    def __init__(self, stream: TextIO, *, indent_size: int = 2) -> None:
        self._stream = stream
        self._indent_size = indent_size
        self._level = 0
        self._at_line_start = True

    @property
    def level(self) -> int:
        return self._level

    @property
    def stream(self) -> TextIO:
        return self._stream

    def write(self, text: str) -> IndentedWriter:
        start = 0
        while start < len(text):
            end = text.find("\n", start)
            chunk = text[start:] if end < 0 else text[start : end + 1]
            if self._at_line_start and chunk != "\n":
                self._stream.write(" " * (self._level * self._indent_size))
            self._stream.write(chunk)
            self._at_line_start = chunk.endswith("\n")
            start += len(chunk)
        return self

    def indent(self, levels: int = 1) -> IndentedWriter:
        self._level += levels
        return self

    def unindent(self, levels: int = 1) -> IndentedWriter:
        if levels > self._level:
            raise ValueError("Cannot unindent below column zero")
        self._level -= levels
        return self

    @contextmanager
    def indented(self, levels: int = 1) -> Iterator[IndentedWriter]:
        """Indent for the duration of the block, restoring on any exit."""
        self.indent(levels)
        try:
            yield self
        finally:
            self.unindent(levels)
