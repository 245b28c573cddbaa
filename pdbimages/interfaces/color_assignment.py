"""ColorAssignment interface — colours for entities and their instances."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

#: Colours are plain 0xRRGGBB integers.
Color = int


def color_to_hex(color: Color) -> str:
    """0x1b9e77 -> '#1b9e77'."""
    return f"#{color:06x}"


@dataclass(frozen=True)
class ColorAssignment:
    """Two parallel colour sequences.

    Attributes:
        entities:  One colour per entity, index-aligned with entity order.
        units:     One colour per chain instance, index-aligned with unit order.
                   The first instance of an entity has exactly the entity colour.
    """
    entities: List[Color] = field(default_factory=list)
    units: List[Color] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [color_to_hex(c) for c in self.entities],
            "units": [color_to_hex(c) for c in self.units],
        }
