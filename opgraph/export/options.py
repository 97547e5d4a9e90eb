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

"""Export configuration.

Options are fixed for the duration of one export. They can be built in code
or loaded from a YAML file:

    # export.yaml
    print_control_flow_edges: true
    condense_to_entry_and_exit_per_block: true
    max_label_length: 40
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class ExportOptions:
    """What the exporter draws and how much text it allows per label.

    Attributes:
        print_data_flow_edges: Draw operand -> consumer edges.
        print_control_flow_edges: Chain consecutive operations of a block.
        print_region_control_flow_edges: Connect blocks to their successors.
        print_result_types: Append result types to operation labels.
        print_attrs: Append one line per attribute to operation labels.
        condense_to_entry_and_exit_per_block: Draw only the first and last
            operation of inner blocks with more than two operations.
        max_label_length: Longer label segments are cut and get "...".
        large_container_element_threshold: Non-splat element containers with
            more elements are drawn as a shape-only placeholder.
    """

    print_data_flow_edges: bool = True
    print_control_flow_edges: bool = False
    print_region_control_flow_edges: bool = False
    print_result_types: bool = True
    print_attrs: bool = True
    condense_to_entry_and_exit_per_block: bool = False
    max_label_length: int = 80
    large_container_element_threshold: int = 16

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.type == "bool" and not isinstance(value, bool):
                raise ValueError(f"{f.name} must be a bool, got {value!r}")
            if f.type == "int" and (
                isinstance(value, bool) or not isinstance(value, int)
            ):
                raise ValueError(f"{f.name} must be an int, got {value!r}")
        if self.max_label_length < 1:
            raise ValueError(
                f"max_label_length must be positive, got {self.max_label_length}"
            )
        if self.large_container_element_threshold < 0:
            raise ValueError(
                "large_container_element_threshold must be non-negative, "
                f"got {self.large_container_element_threshold}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExportOptions:
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown export options: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> ExportOptions:
        """Return a copy with `changes` applied; None values are ignored."""
        return dataclasses.replace(
            self, **{k: v for k, v in changes.items() if v is not None}
        )


def load_options(path: str | Path) -> ExportOptions:
    """Load options from a YAML mapping. An empty file yields the defaults."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return ExportOptions()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of export options")
    return ExportOptions.from_dict(data)
