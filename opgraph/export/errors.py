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

"""Exceptions raised while exporting a graph."""

from __future__ import annotations


class GraphExportError(Exception):
    """Base class for malformed or out-of-order input graphs."""


class UnboundValueError(GraphExportError):
    """A consumer references a value that has no producer node yet."""

    def __init__(self, value: str, consumer: str | None = None):
        self.value = value
        self.consumer = consumer
        msg = f"Value {value} has no producer node"
        if consumer is not None:
            msg += f" (consumed by {consumer})"
        super().__init__(msg)


class DuplicateBindingError(GraphExportError):
    """A value is produced twice."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Value {value} is already bound to a node")
