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

"""Node identities for one export."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Node:
    """A node in the DOT output.

    DOT only draws edges between nodes, never between clusters. An edge can
    however be clipped to a cluster boundary with ``ltail``/``lhead``, so every
    cluster gets an invisible anchor node; ``cluster_id`` is set only on such
    anchors.
    """

    id: int
    cluster_id: int | None = None

    @property
    def is_anchor(self) -> bool:
        return self.cluster_id is not None


class NodeRegistry:
    """Hands out identifiers for nodes and clusters from one shared counter.

    Identifiers start at 1 and are never reused. A cluster's anchor node
    takes the cluster's own identifier, so node ids stay contiguous.
    """

    def __init__(self) -> None:
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def new_node(self) -> int:
        return self._next()

    def new_cluster(self) -> int:
        return self._next()

    @property
    def count(self) -> int:
        """Number of identifiers handed out so far."""
        return self._counter
