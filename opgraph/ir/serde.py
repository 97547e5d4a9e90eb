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
JSON encoding of opgraph IR files.

Every encoded object is a dict tagged with ``_kind``. Built-in kinds start
with an underscore (``_int``, ``_ndarray``, ``_list``, ...); IR classes opt in
with `@register_class` and a dotted kind name:

    @serde.register_class
    class IntegerType(ScalarType):
        _serde_kind = "opgraph.IntegerType"

        def to_json(self) -> dict: ...

        @classmethod
        def from_json(cls, data: dict) -> IntegerType: ...

Files written by `dump` are plain JSON, optionally gzip-compressed, so IR can
be produced by other tools and fed to the `opgraph` command line.
"""

from __future__ import annotations

import base64
import gzip
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import numpy as np

T = TypeVar("T")

_GZIP_MAGIC = b"\x1f\x8b"

# kind -> class, filled by @register_class
_REGISTRY: dict[str, type] = {}

# bool precedes int: isinstance(True, int) holds
_SCALAR_KINDS: list[tuple[type | tuple[type, ...], str, Callable[[Any], Any]]] = [
    (bool, "_bool", bool),
    ((int, np.integer), "_int", int),
    ((float, np.floating), "_float", float),
    (str, "_str", str),
]


def register_class(cls: type[T]) -> type[T]:
    """Make `cls` known to `from_json` under its ``_serde_kind``."""
    kind = getattr(cls, "_serde_kind", None)
    if kind is None:
        raise ValueError(f"{cls.__name__} needs a `_serde_kind` to be registered")
    owner = _REGISTRY.get(kind)
    if owner is not None and owner is not cls:
        raise ValueError(f"Duplicate _serde_kind '{kind}' (owned by {owner.__name__})")
    _REGISTRY[kind] = cls
    return cls


def get_registered_class(kind: str) -> type | None:
    return _REGISTRY.get(kind)


def _encode_array(arr: np.ndarray) -> dict[str, Any]:
    if arr.dtype.kind not in "biuf":
        raise TypeError(f"Cannot serialize arrays of dtype {arr.dtype}")
    raw = np.ascontiguousarray(arr).tobytes()
    return {
        "_kind": "_ndarray",
        "dtype": arr.dtype.str,
        "shape": list(arr.shape),
        "data": base64.b64encode(raw).decode("ascii"),
    }


def _decode_array(data: dict[str, Any]) -> np.ndarray:
    raw = base64.b64decode(data["data"])
    flat = np.frombuffer(raw, dtype=np.dtype(data["dtype"]))
    return flat.reshape(tuple(data["shape"])).copy()


def to_json(obj: Any) -> dict[str, Any]:
    """Encode `obj` as a JSON-compatible dict.

    Handles registered classes, None, bool/int/float/str (numpy scalars
    included), numeric ndarrays, lists, tuples and dicts with string keys.

    Raises:
        TypeError: For anything else.
    """
    kind = getattr(obj, "_serde_kind", None)
    if kind is not None and hasattr(obj, "to_json"):
        encoded = dict(obj.to_json())
        encoded["_kind"] = kind
        return encoded

    if obj is None:
        return {"_kind": "_null"}
    for types, scalar_kind, convert in _SCALAR_KINDS:
        if isinstance(obj, types):
            return {"_kind": scalar_kind, "v": convert(obj)}

    if isinstance(obj, np.ndarray):
        return _encode_array(obj)
    if isinstance(obj, list):
        return {"_kind": "_list", "items": [to_json(x) for x in obj]}
    if isinstance(obj, tuple):
        return {"_kind": "_tuple", "items": [to_json(x) for x in obj]}
    if isinstance(obj, dict):
        bad = [k for k in obj if not isinstance(k, str)]
        if bad:
            raise TypeError(f"Dict keys must be strings, got {bad[0]!r}")
        return {"_kind": "_dict", "items": {k: to_json(v) for k, v in obj.items()}}

    raise TypeError(
        f"Cannot serialize object of type {type(obj).__name__}; "
        "register its class with @serde.register_class"
    )


_BUILTIN_DECODERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "_null": lambda d: None,
    "_bool": lambda d: bool(d["v"]),
    "_int": lambda d: int(d["v"]),
    "_float": lambda d: float(d["v"]),
    "_str": lambda d: str(d["v"]),
    "_list": lambda d: [from_json(x) for x in d["items"]],
    "_tuple": lambda d: tuple(from_json(x) for x in d["items"]),
    "_dict": lambda d: {k: from_json(v) for k, v in d["items"].items()},
    "_ndarray": _decode_array,
}


def from_json(data: dict[str, Any]) -> Any:
    """Inverse of `to_json`.

    Raises:
        ValueError: If the input is not a tagged dict or its kind is unknown.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected dict, got {type(data).__name__}")
    kind = data.get("_kind")
    if kind is None:
        raise ValueError("Missing '_kind' field in JSON data")

    decoder = _BUILTIN_DECODERS.get(kind)
    if decoder is not None:
        return decoder(data)

    cls = _REGISTRY.get(kind)
    if cls is None:
        raise ValueError(
            f"Unknown type kind: '{kind}' (is the defining module imported?)"
        )
    fields = {k: v for k, v in data.items() if k != "_kind"}
    return cls.from_json(fields)  # type: ignore[attr-defined]


def dumps(obj: Any, *, compress: bool = False) -> bytes:
    payload = json.dumps(to_json(obj), separators=(",", ":")).encode("utf-8")
    return gzip.compress(payload) if compress else payload


def loads(payload: bytes) -> Any:
    """Decode bytes from `dumps`; gzip input is detected by its magic number."""
    if payload.startswith(_GZIP_MAGIC):
        payload = gzip.decompress(payload)
    try:
        tree = json.loads(payload.decode("utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid IR JSON: {e}") from e
    return from_json(tree)


def dump(obj: Any, path: str | Path, *, compress: bool = False) -> None:
    Path(path).write_bytes(dumps(obj, compress=compress))


def load(path: str | Path) -> Any:
    return loads(Path(path).read_bytes())
