"""Token-stream text assembler used by every caption template.

Callers push tokens (words or phrases, single punctuation marks, or single
HTML tags) and the builder resolves punctuation clusters, inserts spaces
and renders either HTML or plain text from the same tokens::

    >>> TextBuilder().push("Lorem", "ipsum", ",", ".").build_text()
    'Lorem ipsum.'
"""
from __future__ import annotations

from typing import Iterable, List, Optional

#: Priority when resolving a punctuation cluster (the highest wins, later wins ties).
PUNCTUATION_PRIORITY = {",": 1, ";": 2, "-": 3, ":": 4, ".": 5, "?": 5, "!": 5}

EN_DASH = "–"


class TextBuilder:
    """Collects tokens; see :func:`build_text` for the rendering rules."""

    def __init__(self) -> None:
        self.tokens: List[str] = []

    def push(self, *tokens: str) -> TextBuilder:
        self.tokens.extend(tokens)
        return self

    def build_text(self) -> str:
        """Built text including HTML tags."""
        return build_text(self.tokens, keep_html=True)

    def build_plain_text(self) -> str:
        """Built text without HTML tags."""
        return build_text(self.tokens, keep_html=False)


def build_text(tokens: Iterable[str], keep_html: bool = True) -> str:
    """Resolve punctuation, add spaces, replace hyphen tokens by en-dashes."""
    tokens = list(tokens)
    if not keep_html:
        tokens = [t for t in tokens if not is_tag(t)]
    result: List[str] = []
    previous: Optional[str] = None
    for token in resolve_punctuation(tokens):
        if needs_space(previous, token):
            result.append(" ")
            result.append(token)
            previous = token if not is_tag(token) else None
        else:
            result.append(token)
            previous = token if not is_tag(token) else previous
    return "".join(EN_DASH if s == "-" else s for s in result)


def resolve_punctuation(tokens: Iterable[str]) -> List[str]:
    """Replace each punctuation cluster by its highest-priority mark.

    Empty tokens are dropped; tags inside a cluster do not break it.
    """
    result: List[str] = []
    last_punct_index: Optional[int] = None
    for token in tokens:
        if token == "":
            continue
        if is_tag(token):
            result.append(token)
        elif is_punctuation(token):
            if last_punct_index is not None:
                if PUNCTUATION_PRIORITY[token] >= PUNCTUATION_PRIORITY[result[last_punct_index]]:
                    result[last_punct_index] = token
            else:
                result.append(token)
                last_punct_index = len(result) - 1
        else:
            result.append(token)
            last_punct_index = None
    return result


def is_tag(token: str) -> bool:
    return token.startswith("<") and token.endswith(">")


def is_tag_start(token: str) -> bool:
    return is_tag(token) and not token.startswith("</")


def is_tag_end(token: str) -> bool:
    return is_tag(token) and token.startswith("</")


def is_punctuation(token: str) -> bool:
    return token in PUNCTUATION_PRIORITY


def needs_space(first: Optional[str], second: Optional[str]) -> bool:
    """Whether a space goes between two consecutive tokens."""
    if first is None or second is None:
        return False
    if is_tag(first) and is_tag(second):
        return False
    if is_tag_start(first) or is_tag_end(second):
        return False
    if is_punctuation(second) and second != "-":
        return False
    return True
