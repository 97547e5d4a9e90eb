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

"""Graphviz DOT export of structured IR."""

from __future__ import annotations

from .bindings import ValueBindingTable
from .destinations import (
    FileDestination,
    GraphDestination,
    ViewerDestination,
    view_graph,
    write_graph,
    write_region_cfg,
)
from .edges import EdgeCollector, EdgeDescriptor, EdgeStyle
from .errors import DuplicateBindingError, GraphExportError, UnboundValueError
from .indented import IndentedWriter
from .labels import LabelFormatter
from .model import GraphModel, IRGraphModel
from .nodes import Node, NodeRegistry
from .options import ExportOptions, load_options
from .walker import GraphWalker, export_graph, region_to_dot, to_dot

__all__ = [
    "DuplicateBindingError",
    "EdgeCollector",
    "EdgeDescriptor",
    "EdgeStyle",
    "ExportOptions",
    "FileDestination",
    "GraphDestination",
    "GraphExportError",
    "GraphModel",
    "GraphWalker",
    "IRGraphModel",
    "IndentedWriter",
    "LabelFormatter",
    "Node",
    "NodeRegistry",
    "UnboundValueError",
    "ValueBindingTable",
    "ViewerDestination",
    "export_graph",
    "load_options",
    "region_to_dot",
    "to_dot",
    "view_graph",
    "write_graph",
    "write_region_cfg",
]
