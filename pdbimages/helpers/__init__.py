"""Small shared utilities: deep merge, labels, strict parsing, atomic writes, warning policy."""

from .helpers import (
    capital,
    chain_label,
    deep_merge,
    entity_id_sort_key,
    parse_int_strict,
    to_kebab_case,
    write_text_atomic,
)
from .warnings_policy import WarningPolicy

__all__ = [
    "capital",
    "chain_label",
    "deep_merge",
    "entity_id_sort_key",
    "parse_int_strict",
    "to_kebab_case",
    "write_text_atomic",
    "WarningPolicy",
]
