"""Explicit warning policy threaded through the API client and solvers.

Replaces a process-wide "fail on warning" switch: whoever constructs the
pipeline decides whether warnings are fatal and passes the policy down.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from pdbimages.errors import WarningAsError

logger = logging.getLogger(__name__)


class WarningPolicy:
    """Log warnings and optionally escalate them to :class:`WarningAsError`.

    Issued messages are also kept in :attr:`issued` so a run can report them
    at the end.
    """

    def __init__(self, fail_on_warning: bool = False) -> None:
        self.fail_on_warning = fail_on_warning
        self.issued: List[str] = []

    def warn(self, message: str, log: Optional[logging.Logger] = None) -> None:
        (log or logger).warning(message)
        self.issued.append(message)
        if self.fail_on_warning:
            raise WarningAsError(message)

    def __repr__(self) -> str:
        return f"WarningPolicy(fail_on_warning={self.fail_on_warning})"
