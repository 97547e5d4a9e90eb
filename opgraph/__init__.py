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
opgraph: Graphviz views of structured SSA IR.

Operations, blocks and regions are rendered as nested DOT clusters with
data-flow and control-flow edges between them.
"""

__version__ = "0.1.0"

from opgraph.export import (
    ExportOptions,
    GraphWalker,
    export_graph,
    region_to_dot,
    to_dot,
    view_graph,
    write_graph,
)
from opgraph.logging_config import disable_logging, get_logger, setup_logging

__all__ = [
    "ExportOptions",
    "GraphWalker",
    "__version__",
    "disable_logging",
    "export_graph",
    "get_logger",
    "region_to_dot",
    "setup_logging",
    "to_dot",
    "view_graph",
    "write_graph",
]
