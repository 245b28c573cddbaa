"""Generic helpers shared by the captions, API and pipeline modules."""
from __future__ import annotations

import math
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Union


def deep_merge(first: Any, second: Any) -> Any:
    """Return a new value with ``first`` overridden by ``second``, recursively.

    Mappings are merged key by key.  A ``None`` in ``second`` (or a key absent
    from it) never overwrites; any other non-mapping value in ``second``
    replaces the value from ``first`` entirely (lists are not concatenated).
    Neither input is modified.
    """
    if second is None:
        return first
    if isinstance(first, Mapping) and isinstance(second, Mapping):
        result = dict(first)
        for key, value in second.items():
            result[key] = deep_merge(first.get(key), value)
        return result
    return second


def chain_label(label_chain_id: Optional[str] = None, auth_chain_id: Optional[str] = None) -> str:
    """Consistent chain label: label_asym_id, plus auth_asym_id when it differs.

    >>> chain_label("A", "A")
    'A'
    >>> chain_label("C", "B")
    'C [auth B]'
    """
    if label_chain_id:
        if auth_chain_id and auth_chain_id != label_chain_id:
            return f"{label_chain_id} [auth {auth_chain_id}]"
        return label_chain_id
    if auth_chain_id:
        return f"auth {auth_chain_id}"
    return "?"


def parse_int_strict(text: str) -> int:
    """Parse an integer, failing on empty strings, floats and garbage."""
    if text == "":
        raise ValueError("Is empty string")
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"Is not a number: {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"Is not finite: {text!r}")
    if int(value) != value:
        raise ValueError(f"Is not integer: {text!r}")
    return int(value)


def to_kebab_case(text: str) -> str:
    """'My favorite things' -> 'my-favorite-things'."""
    return re.sub(r"[^\w]+", "-", text.lower())


def capital(text: str) -> str:
    """Capitalize the first letter of ``text``, leave the rest untouched."""
    return re.sub(r"^\w", lambda m: m.group(0).upper(), text)


def entity_id_sort_key(entity_id: str):
    """Integer-like ids first in numeric order, then the rest by string."""
    return (0, int(entity_id), "") if entity_id.isdigit() else (1, 0, entity_id)


def write_text_atomic(path: Union[str, Path], text: str) -> None:
    """Write ``text`` to a temporary file next to ``path``, then rename it over ``path``."""
    path = Path(path)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
