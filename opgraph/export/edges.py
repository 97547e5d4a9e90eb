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

"""Deferred edge emission."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from opgraph.export.dot import (
    attr_list,
    cluster_name,
    escape_string,
    node_id,
    quote_string,
)
from opgraph.export.nodes import Node

if TYPE_CHECKING:
    from opgraph.export.indented import IndentedWriter


class EdgeStyle(enum.Enum):
    """Line style per edge kind; the value is the DOT ``style`` attribute."""

    DATA_FLOW = "solid"
    CONTROL_FLOW = "dashed"
    REGION_CONTROL_FLOW = "bold"


@dataclass(frozen=True)
class EdgeDescriptor:
    source: Node
    target: Node
    label: str
    style: EdgeStyle

    def to_dot(self) -> str:
        attrs = {"style": self.style.value}
        # Clipped edges end at the cluster boundary but their labels do not,
        # so only edges between plain nodes are labeled.
        if self.label and not self.source.is_anchor and not self.target.is_anchor:
            attrs["label"] = quote_string(escape_string(self.label))
        if self.source.cluster_id is not None:
            attrs["ltail"] = cluster_name(self.source.cluster_id)
        if self.target.cluster_id is not None:
            attrs["lhead"] = cluster_name(self.target.cluster_id)
        return f"{node_id(self.source.id)} -> {node_id(self.target.id)} {attr_list(attrs)}"


class EdgeCollector:
    """Ordered edge buffer, flushed once after every node has been written."""

    def __init__(self) -> None:
        self._edges: list[EdgeDescriptor] = []
        self._flushed = False

    def append(self, edge: EdgeDescriptor) -> None:
        if self._flushed:
            raise RuntimeError("Edges were already flushed")
        self._edges.append(edge)

    def flush(self, os: IndentedWriter) -> int:
        """Write all edges in insertion order; return how many were written."""
        if self._flushed:
            raise RuntimeError("Edges were already flushed")
        self._flushed = True
        count = len(self._edges)
        for edge in self._edges:
            os.write(f"{edge.to_dot()};\n")
        self._edges.clear()
        return count

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[EdgeDescriptor]:
        return iter(self._edges)
