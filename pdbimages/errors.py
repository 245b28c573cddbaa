"""Exceptions raised by the planning layer.

All of them subclass a built-in exception, so callers that only know about
``ValueError`` / ``RuntimeError`` still catch them.
"""
from __future__ import annotations

from typing import List, Optional


class InvalidNounSpecificationError(ValueError):
    """Raised when a noun-forms string like ``'cop|y|ies'`` has more than two ``|``."""

    def __init__(self, noun_forms: str) -> None:
        self.noun_forms = noun_forms
        super().__init__(
            f"Invalid noun specification: {noun_forms} (must contain max. 2 |)"
        )


class ApiCallError(RuntimeError):
    """A metadata API call failed with a status other than 404."""

    def __init__(self, url: str, status_code: Optional[int]) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"API call failed with code {status_code} ({url})")


class MissingOutputFilesError(RuntimeError):
    """Some expected output files are missing or empty after generation."""

    def __init__(self, missing: List[str], expected_filelist: str) -> None:
        self.missing = list(missing)
        self.expected_filelist = expected_filelist
        super().__init__(
            f"There are {len(self.missing)} missing/empty output files. "
            f"See list of expected files in {expected_filelist}"
        )


class WarningAsError(RuntimeError):
    """A warning was issued while running with ``fail_on_warning`` enabled."""
