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

"""Small helpers for writing Graphviz DOT syntax.

See https://www.graphviz.org/doc/info/lang.html for the language itself.
"""

from __future__ import annotations

from collections.abc import Mapping

SHAPE_NODE = "ellipse"
SHAPE_NONE = "plain"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
}


def escape_string(text: str) -> str:
    """Escape quotes, backslashes and control characters."""
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\{ord(ch):03o}")
        else:
            out.append(ch)
    return "".join(out)


def quote_string(text: str) -> str:
    return f'"{text}"'


def attr_stmt(key: str, value: str) -> str:
    return f"{key} = {value}"


def attr_list(attrs: Mapping[str, str]) -> str:
    return "[" + ", ".join(attr_stmt(k, v) for k, v in attrs.items()) + "]"


def node_id(node_number: int) -> str:
    return f"v{node_number}"


def cluster_name(cluster_id: int) -> str:
    return f"cluster_{cluster_id}"
