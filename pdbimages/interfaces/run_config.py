"""RunConfig interface — everything one planning run needs to know.

Loaded from an optional YAML file and then overridden by command-line
flags (see :mod:`pdbimages.pipeline.plan_images`).
"""
from __future__ import annotations

import copy
import json
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from pdbimages.helpers.helpers import parse_int_strict

#: Modes of operation.
MODES = ("pdb", "alphafold")

#: Image types that can be requested ("all" expands per mode).
IMAGE_TYPES = (
    "entry", "assembly", "entity", "domain", "ligand", "modres",
    "bfactor", "validation", "plddt", "all",
)

#: Image types valid for each mode, in output order.
IMAGE_TYPES_FOR_MODES: Dict[str, List[str]] = {
    "pdb": ["entry", "assembly", "entity", "domain", "ligand", "modres", "bfactor", "validation"],
    "alphafold": ["plddt"],
}

#: View modes: only front / front+side+top / per-type automatic.
VIEW_MODES = ("front", "all", "auto")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_API_URL = "https://www.ebi.ac.uk/pdbe/api"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ImageSize:
    """Output image size in pixels."""
    width: int
    height: int

    @classmethod
    def parse(cls, text: str) -> ImageSize:
        """Parse '800x600'."""
        parts = text.split("x")
        if len(parts) != 2:
            raise ValueError(
                f"Invalid image size string: {text!r} (must be two x-separated "
                "integers (width and height), e.g. '400x300')"
            )
        try:
            width, height = parse_int_strict(parts[0]), parse_int_strict(parts[1])
        except ValueError as exc:
            raise ValueError(f"Invalid image size string: {text!r} ({exc})") from exc
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid image size string: {text!r} (must be positive)")
        return cls(width, height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class RunConfig:
    """Configuration of one planning run.

    Attributes:
        entry_id:         PDB ID or AlphaFoldDB ID.
        output_dir:       Directory holding images and caption records.
        mode:             "pdb" | "alphafold".
        types:            Requested image types ("all" for every type of the mode).
        view:             "front" | "all" | "auto".
        sizes:            Output image sizes; empty disables image files.
        api_url:          PDBe API base URL (http(s):// or file://).
        api_retry:        Retry failed API calls (5xx / connection errors).
        no_api:           Do not use the API at all; neutral defaults instead.
        force_bfactor:    Plan bfactor images even for non-diffraction entries.
        date:             "last_modification" date (YYYY-MM-DD); today if None.
        clear:            Remove output directory contents before running.
        log_level:        Logging level name.
        fail_on_warning:  Escalate warnings to errors.
    """
    entry_id: str
    output_dir: str
    mode: str = "pdb"
    types: List[str] = field(default_factory=lambda: ["all"])
    view: str = "auto"
    sizes: List[ImageSize] = field(default_factory=lambda: [ImageSize(800, 800)])
    api_url: str = DEFAULT_API_URL
    api_retry: bool = False
    no_api: bool = False
    force_bfactor: bool = False
    date: Optional[str] = None
    clear: bool = False
    log_level: str = "INFO"
    fail_on_warning: bool = False

    # ── Derived values ───────────────────────────────────────────────

    def resolved_types(self) -> List[str]:
        """Requested types valid for this mode, in output order."""
        valid = IMAGE_TYPES_FOR_MODES[self.mode]
        if "all" in self.types:
            return list(valid)
        return [t for t in valid if t in self.types]

    def validate(self) -> None:
        """Raise ValueError on any inconsistent setting."""
        if self.mode not in MODES:
            raise ValueError(f"Invalid value for mode: {self.mode}")
        valid = IMAGE_TYPES_FOR_MODES[self.mode]
        for t in self.types:
            if t not in IMAGE_TYPES:
                raise ValueError(f"Invalid image type: {t}")
            if t != "all" and t not in valid:
                raise ValueError(f"Image type {t!r} is not valid for mode {self.mode!r}")
        if self.view not in VIEW_MODES:
            raise ValueError(f"Invalid value for view: {self.view}")
        if self.date is not None and not _DATE_RE.match(self.date):
            raise ValueError(f"Invalid date: {self.date!r} (must be YYYY-MM-DD)")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
        if not self.entry_id:
            raise ValueError("entry_id must not be empty")

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["sizes"] = [str(s) for s in self.sizes]
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> RunConfig:
        data = copy.deepcopy(d)
        if "sizes" in data:
            data["sizes"] = [
                s if isinstance(s, ImageSize) else ImageSize.parse(str(s))
                for s in (data["sizes"] or [])
            ]
        if isinstance(data.get("types"), str):
            data["types"] = [data["types"]]
        return cls(**data)

    @classmethod
    def from_yaml(
        cls,
        path: Union[str, Path],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> RunConfig:
        """Load a YAML config, apply non-None ``overrides`` on top."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value
        return cls.from_dict(data)
