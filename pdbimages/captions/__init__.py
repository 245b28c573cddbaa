"""Caption text assembly, per-image caption builders and the caption collector."""

from .captions import (
    StructureContext,
    count_noun,
    for_bfactor,
    for_domain,
    for_entry_or_assembly,
    for_geometry_validation,
    for_highlighted_entity,
    for_ligand_environment,
    for_modified_residue,
    for_plddt,
    how_many_mer,
)
from .collect import collect_captions, get_common_suffixes
from .text_builder import TextBuilder
