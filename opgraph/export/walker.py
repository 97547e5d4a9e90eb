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
Graphviz export of structured IR.

The walker descends operations, regions and blocks in a single forward pass:

- every block and every operation with regions becomes a DOT cluster whose
  first statement is an invisible anchor node;
- every other operation and every block argument becomes a node;
- data-flow, control-flow and region control-flow edges are buffered and
  written after the last node, so no edge refers to an undeclared node.

Example:
--------
    import io
    from opgraph.export.walker import GraphWalker

    out = io.StringIO()
    GraphWalker(out).export_graph(module)
    print(out.getvalue())
    # digraph G {
    #   compound = true;
    #   subgraph cluster_1 {
    #     v1 [label = "", shape = plain];
    #     label = "builtin.module : ()";
    #     ...
"""

from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, TextIO

from opgraph.export.bindings import ValueBindingTable
from opgraph.export.dot import (
    SHAPE_NODE,
    SHAPE_NONE,
    attr_list,
    attr_stmt,
    cluster_name,
    escape_string,
    node_id,
    quote_string,
)
from opgraph.export.edges import EdgeCollector, EdgeDescriptor, EdgeStyle
from opgraph.export.indented import IndentedWriter
from opgraph.export.labels import LabelFormatter
from opgraph.export.model import GraphModel, IRGraphModel
from opgraph.export.nodes import Node, NodeRegistry
from opgraph.export.options import ExportOptions
from opgraph.logging_config import get_logger

logger = get_logger(__name__)


class GraphWalker:
    """Single-use DOT exporter for one operation or region.

    Args:
        stream: Text stream or `IndentedWriter` receiving the DOT text.
        options: What to draw; defaults to `ExportOptions()`.
        model: IR adapter; defaults to `IRGraphModel()`.
    """

    def __init__(
        self,
        stream: TextIO | IndentedWriter,
        options: ExportOptions | None = None,
        model: GraphModel | None = None,
    ):
        self.os = stream if isinstance(stream, IndentedWriter) else IndentedWriter(stream)
        self.options = options or ExportOptions()
        self.model = model or IRGraphModel()
        self.labels = LabelFormatter(self.options, self.model)
        self.registry = NodeRegistry()
        self.edges = EdgeCollector()
        self.bindings = ValueBindingTable(describe=self.model.value_name)

        self._print_data_flow = self.options.print_data_flow_edges
        self._print_control_flow = self.options.print_control_flow_edges
        self._print_region_control_flow = self.options.print_region_control_flow_edges

        self._block_first: dict[Any, Node] = {}
        self._block_last: dict[Any, Node] = {}
        self._skipped_values: set[Any] = set()
        self._used = False

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def export_graph(self, root: Any) -> None:
        """Write `root`, everything nested in it, and then all edges."""
        self._claim()
        logger.debug("Exporting %s", self.model.operation_name(root))
        with self._emit_graph():
            self.process_operation(root)
            self._emit_all_edges()

    def emit_region_cfg(self, region: Any) -> None:
        """Write the control-flow graph of `region`, without data-flow edges."""
        self._claim()
        self._print_data_flow = False
        self._print_control_flow = True
        self._print_region_control_flow = True
        logger.debug("Exporting region CFG")
        with self._emit_graph():
            self.process_region(region)
            self._emit_all_edges()

    def _claim(self) -> None:
        if self._used:
            raise RuntimeError("GraphWalker instances export exactly one graph")
        self._used = True

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def process_operation(self, op: Any) -> Node:
        """Emit `op` as a cluster (if it has regions) or a node, plus its
        incoming data-flow edges. Returns the node representing `op`."""
        regions = self.model.regions_of(op)
        if regions:
            with self._emit_cluster(self.labels.format_operation(op)) as node:
                for region in regions:
                    self.process_region(region)
        else:
            node = self._emit_node(self.labels.format_operation(op))

        if self._print_data_flow:
            operands = self.model.operands_of(op)
            consumer = self.model.operation_name(op)
            for i, operand in enumerate(operands):
                # producer was dropped from a condensed block
                if operand in self._skipped_values:
                    continue
                self._emit_edge(
                    self.bindings.lookup(operand, consumer),
                    node,
                    label="" if len(operands) == 1 else str(i),
                    style=EdgeStyle.DATA_FLOW,
                )

        for result in self.model.results_of(op):
            self.bindings.bind(result, node)
        return node

    def process_region(self, region: Any) -> None:
        blocks = self.model.blocks_of(region)
        for block in blocks:
            self.process_block(block)

        if not self._print_region_control_flow:
            return
        for block in blocks:
            successors = self.model.successors_of(block)
            for i, successor in enumerate(successors):
                source = self._block_last.get(block)
                target = self._block_first.get(successor)
                if source is None or target is None:
                    logger.debug(
                        "Skipping edge %s -> %s: empty block",
                        self.model.block_name(block),
                        self.model.block_name(successor),
                    )
                    continue
                self._emit_edge(
                    source,
                    target,
                    label="" if len(successors) == 1 else str(i),
                    style=EdgeStyle.REGION_CONTROL_FLOW,
                )

    def process_block(self, block: Any) -> None:
        with self._emit_cluster(self.model.block_name(block)):
            for index, arg in enumerate(self.model.arguments_of(block)):
                self.bindings.bind(
                    arg, self._emit_node(self.labels.format_block_argument(index))
                )

            ops = self.model.operations_of(block)
            if self._should_condense(block, ops):
                for skipped in ops[1:-1]:
                    self._skipped_values.update(self.model.results_of(skipped))
                first = self.process_operation(ops[0])
                last = self.process_operation(ops[-1])
                self._block_first[block] = first
                self._block_last[block] = last
                if self._print_control_flow:
                    self._emit_edge(first, last, "", EdgeStyle.CONTROL_FLOW)
                return

            prev: Node | None = None
            for op in ops:
                node = self.process_operation(op)
                if prev is None:
                    self._block_first[block] = node
                elif self._print_control_flow:
                    self._emit_edge(prev, node, "", EdgeStyle.CONTROL_FLOW)
                prev = node
            if prev is not None:
                self._block_last[block] = prev

    def _should_condense(self, block: Any, ops: Sequence[Any]) -> bool:
        """Condense only blocks whose skipped results are not read outside
        the block. Readers inside it lose the edge from the skipped producer."""
        if (
            not self.options.condense_to_entry_and_exit_per_block
            or len(ops) <= 2
            or self.model.is_outermost_block(block)
        ):
            return False
        if not self._print_data_flow:
            return True

        in_block = set(ops)
        for op in ops[1:-1]:
            for result in self.model.results_of(op):
                for user in self.model.users_of(result):
                    if not self._is_within(user, in_block):
                        logger.debug(
                            "Not condensing %s: %s is used by %s",
                            self.model.block_name(block),
                            self.model.value_name(result),
                            self.model.operation_name(user),
                        )
                        return False
        return True

    def _is_within(self, op: Any, ancestors: set[Any]) -> bool:
        while op is not None:
            if op in ancestors:
                return True
            op = self.model.enclosing_operation(op)
        return False

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------
    @contextmanager
    def _emit_graph(self) -> Iterator[None]:
        self.os.write("digraph G {\n")
        with self.os.indented():
            # Edges between clusters are allowed only in compound mode.
            self.os.write(f"{attr_stmt('compound', 'true')};\n")
            yield
        self.os.write("}\n")

    @contextmanager
    def _emit_cluster(self, label: str) -> Iterator[Node]:
        cluster_id = self.registry.new_cluster()
        self.os.write(f"subgraph {cluster_name(cluster_id)} {{\n")
        with self.os.indented():
            self._write_node_stmt(cluster_id, "", SHAPE_NONE)
            self.os.write(f"{attr_stmt('label', quote_string(escape_string(label)))};\n")
            yield Node(cluster_id, cluster_id)
        self.os.write("}\n")

    def _emit_node(self, label: str, shape: str = SHAPE_NODE) -> Node:
        number = self.registry.new_node()
        self._write_node_stmt(number, label, shape)
        return Node(number)

    def _write_node_stmt(self, number: int, label: str, shape: str) -> None:
        attrs = {"label": quote_string(escape_string(label)), "shape": shape}
        self.os.write(f"{node_id(number)} {attr_list(attrs)};\n")

    def _emit_edge(self, source: Node, target: Node, label: str, style: EdgeStyle) -> None:
        self.edges.append(EdgeDescriptor(source, target, label, style))

    def _emit_all_edges(self) -> None:
        count = self.edges.flush(self.os)
        logger.debug("Wrote %d nodes and %d edges", self.registry.count, count)


def export_graph(
    root: Any,
    stream: TextIO | IndentedWriter,
    options: ExportOptions | None = None,
    model: GraphModel | None = None,
) -> None:
    """Write `root` as a DOT digraph to `stream`."""
    GraphWalker(stream, options, model).export_graph(root)


def to_dot(
    root: Any, options: ExportOptions | None = None, model: GraphModel | None = None
) -> str:
    """Return the DOT text for `root`."""
    out = io.StringIO()
    export_graph(root, out, options, model)
    return out.getvalue()


def region_to_dot(
    region: Any, options: ExportOptions | None = None, model: GraphModel | None = None
) -> str:
    """Return the control-flow DOT text for `region`."""
    out = io.StringIO()
    GraphWalker(out, options, model).emit_region_cfg(region)
    return out.getvalue()
