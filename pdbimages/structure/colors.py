"""Color Assignment Engine — reproducible colours for entities and chain instances.

Entities get a base colour from curated non-gray palettes (or from the
element colour for single-element entities); every chain instance of an
entity gets a "sister colour" of that base colour.  The first instance
always has exactly the entity colour.

Colours are 0xRRGGBB integers (see :mod:`pdbimages.interfaces.color_assignment`).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from pdbimages.interfaces.color_assignment import Color, ColorAssignment
from pdbimages.interfaces.entity_info import EntityInfo
from pdbimages.interfaces.structure_data import StructureData
from pdbimages.structure.structure_info import get_elements_in_chains, get_entity_info

logger = logging.getLogger(__name__)

# ColorBrewer palettes, last colour (gray) dropped
SET1: List[Color] = [0xe41a1c, 0x377eb8, 0x4daf4a, 0x984ea3, 0xff7f00, 0xffff33, 0xa65628, 0xf781bf]
SET2: List[Color] = [0x66c2a5, 0xfc8d62, 0x8da0cb, 0xe78ac3, 0xa6d854, 0xffd92f, 0xe5c494]
DARK2: List[Color] = [0x1b9e77, 0xd95f02, 0x7570b3, 0xe7298a, 0x66a61e, 0xe6ab02, 0xa6761d]

# Without red/blue/yellow, which clash with O/N/S element colours
SET1_SAFE: List[Color] = [SET1[2], SET1[3], SET1[4], SET1[6], SET1[7]]
# Without yellow; the brownish one goes first so it is used last in reversed lists
SET2_SAFE: List[Color] = [SET2[6], SET2[0], SET2[1], SET2[2], SET2[3], SET2[4]]

# Plotly palettes, gray dropped (VIVID also without its Set1-like blue)
VIVID: List[Color] = [0xe58606, 0x5d69b1, 0x52bca3, 0x99c945, 0xcc61b0, 0x24796c, 0xdaa51b, 0x764e9f, 0xed645a]
BOLD: List[Color] = [0x7f3c8d, 0x11a579, 0x3969ac, 0xf2b701, 0xe73f74, 0x80ba5a, 0xe68310, 0x008695, 0xcf1c90, 0xf97b72]
PASTEL: List[Color] = [0x66c5cc, 0xf6cf71, 0xf89c74, 0xdcb0f2, 0x87c55f, 0x9eb9f3, 0xfe88b1, 0xc9db74, 0x8be0a4, 0xb497e7]

#: Polymer entities, decent colours first.
ENTITY_COLORS: List[Color] = DARK2 + BOLD + PASTEL + SET2_SAFE
#: Ligand entities, same as polymers but drawn from the end.
LIGAND_COLORS: List[Color] = ENTITY_COLORS[::-1]
#: Domain highlights, brighter colours first.
ANNOTATION_COLORS: List[Color] = SET1 + VIVID
#: Modified-residue highlights, same as domains but drawn from the end.
MODRES_COLORS: List[Color] = ANNOTATION_COLORS[::-1]

DEFAULT_COLORS = ENTITY_COLORS

#: Jmol element colours, keyed by upper-case element symbol.
ELEMENT_COLORS: Dict[str, Color] = {
    "H": 0xFFFFFF, "D": 0xFFFFC0, "T": 0xFFFFA0, "HE": 0xD9FFFF, "LI": 0xCC80FF,
    "BE": 0xC2FF00, "B": 0xFFB5B5, "C": 0x909090, "N": 0x3050F8, "O": 0xFF0D0D,
    "F": 0x90E050, "NE": 0xB3E3F5, "NA": 0xAB5CF2, "MG": 0x8AFF00, "AL": 0xBFA6A6,
    "SI": 0xF0C8A0, "P": 0xFF8000, "S": 0xFFFF30, "CL": 0x1FF01F, "AR": 0x80D1E3,
    "K": 0x8F40D4, "CA": 0x3DFF00, "SC": 0xE6E6E6, "TI": 0xBFC2C7, "V": 0xA6A6AB,
    "CR": 0x8A99C7, "MN": 0x9C7AC7, "FE": 0xE06633, "CO": 0xF090A0, "NI": 0x50D050,
    "CU": 0xC88033, "ZN": 0x7D80B0, "GA": 0xC28F8F, "GE": 0x668F8F, "AS": 0xBD80E3,
    "SE": 0xFFA100, "BR": 0xA62929, "KR": 0x5CB8D1, "RB": 0x702EB0, "SR": 0x00FF00,
    "Y": 0x94FFFF, "ZR": 0x94E0E0, "MO": 0x54B5B5, "RU": 0x248F8F, "RH": 0x0A7D8C,
    "PD": 0x006985, "AG": 0xC0C0C0, "CD": 0xFFD98F, "IN": 0xA67573, "SN": 0x668080,
    "SB": 0x9E63B5, "TE": 0xD47A00, "I": 0x940094, "XE": 0x429EB0, "CS": 0x57178F,
    "BA": 0x00C900, "LA": 0x70D4FF, "GD": 0x45FFC7, "YB": 0x00BF38, "W": 0x2194D6,
    "OS": 0x266696, "IR": 0x175487, "PT": 0xD0D0E0, "AU": 0xFFD123, "HG": 0xB8B8D0,
    "TL": 0xA6544D, "PB": 0x575961, "BI": 0x9E4FB5, "U": 0x008FFF,
}

WATER_COLOR: Color = ELEMENT_COLORS["O"]


class CycleIterator:
    """Cycle over ``values`` forever; the position is plain, inspectable state."""

    def __init__(self, values: Sequence[Color]) -> None:
        if not values:
            raise ValueError("Cannot cycle over an empty sequence")
        self.values = list(values)
        self.index = 0

    def __iter__(self) -> CycleIterator:
        return self

    def __next__(self) -> Color:
        value = self.values[self.index]
        self.index = (self.index + 1) % len(self.values)
        return value


def assign_entity_and_unit_colors(
    entity_info: Mapping[str, EntityInfo],
    unit_entity_ids: Sequence[str],
    entity_elements: Optional[Mapping[str, Sequence[str]]] = None,
) -> ColorAssignment:
    """Entity colours (in entity index order) and unit colours (in unit order).

    ``entity_elements`` gives the element symbols present in each entity;
    entities made of exactly one element get that element's colour.
    """
    polymer_colors = CycleIterator(ENTITY_COLORS)
    ligand_colors = CycleIterator(LIGAND_COLORS)
    entity_elements = entity_elements or {}

    entity_colors: List[Color] = []
    entity_index: Dict[str, int] = {}
    for entity_id, info in sorted(entity_info.items(), key=lambda kv: kv[1].index):
        symbols = entity_elements.get(entity_id, [])
        color: Optional[Color] = None
        if info.type == "water":
            color = WATER_COLOR
        if color is None and len(symbols) == 1:
            color = ELEMENT_COLORS.get(symbols[0].upper())  # unknown elements fall through
        if color is None and info.type == "non-polymer":
            color = next(ligand_colors)
        if color is None:
            color = next(polymer_colors)
        entity_index[entity_id] = len(entity_colors)
        entity_colors.append(color)

    unit_colors: List[Color] = []
    instance_counters: Dict[str, int] = {}
    for entity_id in unit_entity_ids:
        base = entity_colors[entity_index[entity_id]]
        i = instance_counters.get(entity_id, 0)
        unit_colors.append(get_sister_color(base, i))
        instance_counters[entity_id] = i + 1
    return ColorAssignment(entities=entity_colors, units=unit_colors)


def assign_structure_colors(structure: StructureData) -> ColorAssignment:
    """:func:`assign_entity_and_unit_colors` for a whole structure."""
    entity_info = get_entity_info(structure)
    entity_elements = {
        entity_id: get_elements_in_chains(structure, info.chains)
        for entity_id, info in entity_info.items()
    }
    unit_entity_ids = [
        structure.chains[structure.unit_chain_index(unit)].entity_id
        for unit in structure.units
    ]
    assignment = assign_entity_and_unit_colors(entity_info, unit_entity_ids, entity_elements)
    logger.debug("Assigned colours to %d entities and %d units",
                 len(assignment.entities), len(assignment.units))
    return assignment


def color_to_rgb(color: Color) -> Tuple[float, float, float]:
    """0xRRGGBB -> normalized (r, g, b)."""
    return ((color >> 16 & 0xFF) / 255, (color >> 8 & 0xFF) / 255, (color & 0xFF) / 255)


def rgb_to_color(r: float, g: float, b: float) -> Color:
    """Normalized (r, g, b) -> 0xRRGGBB, clamping each channel to [0, 1]."""
    channels = [int(round(max(0.0, min(1.0, v)) * 255)) for v in (r, g, b)]
    return channels[0] << 16 | channels[1] << 8 | channels[2]


def color_distance(a: Color, b: Color) -> float:
    """Euclidean distance of two colours in 0-255 RGB space."""
    ra, ga, ba = color_to_rgb(a)
    rb, gb, bb = color_to_rgb(b)
    return 255 * math.sqrt((ra - rb) ** 2 + (ga - gb) ** 2 + (ba - bb) ** 2)


# ---------------------------------------------------------------------------
# PSL colour space
# ---------------------------------------------------------------------------
# Ad-hoc cylindrical space similar to HSL/HCL ("phase, saturation,
# luminosity").  It compensates for the different luminosities of red,
# green and blue, and avoids HCL turning lighter blues into cyan.

_LUMINOSITIES = {"r": 0.32, "g": 0.57, "b": 0.11}
_SIN60 = math.sin(math.pi / 3)
# Columns are the XYL images of pure red, green and blue
_M_RGB_TO_XYL = np.array([
    [1.0, -0.5, -0.5],
    [0.0, _SIN60, -_SIN60],
    [_LUMINOSITIES["r"], _LUMINOSITIES["g"], _LUMINOSITIES["b"]],
])
_M_XYL_TO_RGB = np.linalg.inv(_M_RGB_TO_XYL)


def _rgb_to_xyl(rgb: Sequence[float]) -> np.ndarray:
    return _M_RGB_TO_XYL @ np.asarray(rgb, dtype=float)


def _xyl_to_rgb(xyl: Sequence[float]) -> np.ndarray:
    return _M_XYL_TO_RGB @ np.asarray(xyl, dtype=float)


def _get_sat(x: float, y: float, lum: float) -> float:
    """Saturation of chroma (x, y) at luminosity ``lum`` (1 = edge of RGB gamut)."""
    dr, dg, db = _xyl_to_rgb((x, y, 0.0))
    sat = 0.0
    if 0 < lum < 1:
        for d in (dr, dg, db):
            if d > 0:
                sat = max(sat, d / (1 - lum))
            elif d < 0:
                sat = max(sat, -d / lum)
    return sat


def color_to_psl(color: Color) -> Tuple[float, float, float]:
    x, y, lum = _rgb_to_xyl(color_to_rgb(color))
    phi = math.degrees(math.atan2(y, x))
    if phi < 0:
        phi += 360
    return phi, min(_get_sat(x, y, lum), 1.0), float(lum)


def psl_to_color(phi: float, sat: float, lum: float) -> Color:
    if lum == 0:
        return rgb_to_color(0, 0, 0)
    if lum == 1:
        return rgb_to_color(1, 1, 1)
    if sat == 0:
        return rgb_to_color(lum, lum, lum)
    x0 = math.cos(math.radians(phi))
    y0 = math.sin(math.radians(phi))
    norm_sat = _get_sat(x0, y0, lum)
    r, g, b = _xyl_to_rgb((sat * x0 / norm_sat, sat * y0 / norm_sat, lum))
    return rgb_to_color(r, g, b)


# ---------------------------------------------------------------------------
# Sister colours
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SisterColorParams:
    """How far sister colours may drift from the base colour."""
    hue_radius: float = 90.0
    sat_radius: float = 0.3
    sat_min: float = 0.2
    sat_max: float = 1.0
    lum_radius: float = 0.25
    lum_min: float = 0.1
    lum_max: float = 0.9


DEFAULT_SISTER_COLOR_PARAMS = SisterColorParams()

PHI = (1 + math.sqrt(5)) / 2
PHI2 = PHI / 5 ** (1 / 5)
PHI3 = PHI / 5 ** (4 / 5)


def magic_number(i: int) -> float:
    """First N values are nearly equidistant in [0, 1), for any N."""
    return (i * PHI) % 1


def magic_number2(i: int) -> float:
    return (i * PHI2) % 1


def magic_number3(i: int) -> float:
    return (i * PHI3) % 1


def remap(
    value: float,
    center: float,
    radius: float,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> float:
    """Map [0, 1) onto [center - radius, center + radius) with 0 -> center.

    [0, 0.5) maps above the centre, [0.5, 1) below it.  With bounds, the
    codomain is shifted to fit in [min_value, max_value).
    """
    start = center - radius
    if min_value is not None and max_value is not None:
        span = min(2 * radius, max_value - min_value)
    else:
        span = 2 * radius
    if min_value is not None:
        start = max(start, min_value)
        center = max(center, min_value)
    if max_value is not None:
        start = min(start, max_value - span)
        center = min(center, max_value - 0.001 * span)
    value_shift = (center - start) / span if span > 0 else 0
    return start + ((value + value_shift) % 1) * span


def get_sister_color(base: Color, i: int, params: SisterColorParams = DEFAULT_SISTER_COLOR_PARAMS) -> Color:
    """i-th sister colour of ``base``; the 0th is ``base`` itself.

    Sister colours differ slightly in hue, saturation and luminosity from
    the base and from each other.
    """
    if i == 0:
        return base
    hue0, sat0, lum0 = color_to_psl(base)
    hue = remap(magic_number2(i), hue0, params.hue_radius)
    sat = remap(magic_number3(i), sat0, params.sat_radius, params.sat_min, params.sat_max)
    lum = remap((1 - magic_number(i)) % 1, lum0, params.lum_radius, params.lum_min, params.lum_max)
    return psl_to_color(hue, sat, lum)
