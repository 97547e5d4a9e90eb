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

"""Node and cluster labels.

Labels are returned unescaped; the walker escapes them when it embeds them in
a quoted DOT string.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from opgraph.export.model import GraphModel, IRGraphModel
from opgraph.export.options import ExportOptions
from opgraph.ir.attributes import DenseElementsAttr

ELLIPSIS = "..."


class LabelFormatter:
    """Render operations and attribute values into bounded label text."""

    def __init__(
        self, options: ExportOptions | None = None, model: GraphModel | None = None
    ):
        self.options = options or ExportOptions()
        self.model = model or IRGraphModel()

    def truncate(self, text: str) -> str:
        limit = self.options.max_label_length
        if len(text) <= limit:
            return text
        return text[:limit] + ELLIPSIS

    def format_operation(self, op: Any) -> str:
        """Name and ``: (types)`` on the first line, capped at
        `max_label_length`, then one ``name: value`` line per attribute."""
        head = self.model.operation_name(op)
        if self.options.print_result_types:
            types = ", ".join(
                self.truncate(str(t)) for t in self.model.result_types_of(op)
            )
            head += f" : ({types})"
        parts = [self.truncate(head)]
        if self.options.print_attrs:
            for name, value in self.model.attributes_of(op):
                parts.append(f"\n{name}: {self.format_attribute(value)}")
        return "".join(parts)

    def format_attribute(self, value: Any) -> str:
        """Render an attribute value, eliding large constant containers.

        Splats print in full since their text does not grow with the
        element count. Other element containers above the threshold keep only
        their rank and type, e.g. ``[[...]] : Tensor[f32, (64, 64)]``.
        """
        threshold = self.options.large_container_element_threshold

        if isinstance(value, np.ndarray) and value.dtype.kind in "biuf":
            value = DenseElementsAttr.from_array(value)

        if isinstance(value, DenseElementsAttr):
            if value.is_splat:
                return str(value)
            if value.num_elements > threshold:
                rank = value.rank
                return f"{'[' * rank}{ELLIPSIS}{']' * rank} : {value.type}"
        elif isinstance(value, (list, tuple)) and len(value) > threshold:
            return f"[{ELLIPSIS}]"

        return self.truncate(str(value))

    def format_block_argument(self, index: int) -> str:
        return f"arg{index}"
