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

"""Mapping from SSA values to the node of their producer."""

from __future__ import annotations

from collections.abc import Callable, Hashable

from opgraph.export.errors import DuplicateBindingError, UnboundValueError
from opgraph.export.nodes import Node


class ValueBindingTable:
    """Write-once table from value identity to producer node.

    Args:
        describe: Renders a value for error messages.
    """

    def __init__(self, describe: Callable[[Hashable], str] = str) -> None:
        self._nodes: dict[Hashable, Node] = {}
        self._describe = describe

    def bind(self, value: Hashable, node: Node) -> None:
        if value in self._nodes:
            raise DuplicateBindingError(self._describe(value))
        self._nodes[value] = node

    def lookup(self, value: Hashable, consumer: str | None = None) -> Node:
        try:
            return self._nodes[value]
        except KeyError:
            raise UnboundValueError(self._describe(value), consumer) from None

    def __contains__(self, value: Hashable) -> bool:
        return value in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
