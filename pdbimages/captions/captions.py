"""Caption builders — one pure function per image type.

Each builder takes a small context and returns an
:class:`~pdbimages.interfaces.image_spec.ImageSpec` holding the filename
stem, alt text, HTML caption, plain caption and the manifest section the
image belongs to.  The HTML and plain captions are always rendered from
the same :class:`TextBuilder`.  :func:`save_caption` writes one spec to
``<filename>.caption.json`` for the collector.

HTML attributes use apostrophes because captions end up inside JSON.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from pdbimages.captions.text_builder import TextBuilder
from pdbimages.errors import InvalidNounSpecificationError
from pdbimages.helpers.helpers import capital, chain_label, write_text_atomic
from pdbimages.interfaces.entity_info import EntityInfo, LigandInfo, ModifiedResidueInfo
from pdbimages.interfaces.image_spec import ImageSpec, ViewType
from pdbimages.pipeline import paths

logger = logging.getLogger(__name__)

UL_, _UL = "<ul class='image_legend_ul'>", "</ul>"
LI_, _LI = "<li class='image_legend_li'>", "</li>"
B_, _B = "<span class='highlight'>", "</span>"

_MER_NAMES = {
    1: "monomer", 2: "dimer", 3: "trimer", 4: "tetramer", 5: "pentamer",
    6: "hexamer", 7: "heptamer", 8: "octamer", 9: "nonamer", 10: "decamer",
    11: "undecamer", 12: "dodecamer",
}


@dataclass
class StructureContext:
    """Basic info about the structure being rendered.

    Attributes:
        pdb_id:        PDB or AlphaFoldDB identifier.
        assembly_id:   Assembly id ("1", "2", ...), None for the deposited model.
        entity_names:  Names from the API, overriding descriptions in ``entity_info``.
        entity_info:   Entities of the rendered structure (deposited or assembly).
    """
    pdb_id: str
    assembly_id: Optional[str] = None
    entity_names: Mapping[str, List[str]] = field(default_factory=dict)
    entity_info: Mapping[str, EntityInfo] = field(default_factory=dict)


def for_entry_or_assembly(
    context: StructureContext,
    coloring: str,
    view: ViewType = None,
    is_preferred_assembly: bool = False,
    n_models: int = 1,
) -> ImageSpec:
    """Captions for ``entry`` / ``assembly`` images; ``coloring`` is "chains" or "entities"."""
    pdb_id, assembly_id = context.pdb_id, context.assembly_id
    color_clause = "by chain" if coloring == "chains" else "by chemically distinct molecules"
    model_clause = f"ensemble of {n_models} models" if n_models > 1 else ""
    description = TextBuilder()
    description.push(structure_phrase(context), "of PDB entry", B_, pdb_id, _B, "coloured", color_clause,
                     ",", model_clause, ",", view_phrase(view), ".")
    description.push("This structure contains", ":", UL_)
    for entity_id, info in context.entity_info.items():
        description.push(LI_, count_noun(info.n_instances, "cop|y|ies"), "of",
                         B_, entity_name(context, entity_id), _B, ";", _LI)
    description.push(".", _UL)
    alt = TextBuilder().push("PDB entry", pdb_id, "coloured", color_clause, ",", model_clause, ",",
                             view_phrase(view), ".")
    stem_coloring = "chain" if coloring == "chains" else "chemically_distinct_molecules"
    return ImageSpec(
        filename=paths.entry_stem(pdb_id, assembly_id, stem_coloring, view),
        alt=alt.build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["assembly", assembly_id] if assembly_id else ["entry", "all"],
        extras={"preferred": is_preferred_assembly} if assembly_id else None,
    )


def for_bfactor(pdb_id: str, view: ViewType = None) -> ImageSpec:
    description = TextBuilder()
    description.push("The deposited structure of PDB entry", B_, pdb_id, _B, "coloured by B-factor values",
                     ",", view_phrase(view), ".")
    description.push(
        "The macromolecules are shown in backbone representation. The thickness reflects the "
        "B-factor values (thin = low, thick = high). The colour varies from blue to red "
        "corresponding to a B-factor range of 0 to 100 square angstroms."
    )
    return ImageSpec(
        filename=paths.bfactor_stem(pdb_id, view),
        alt=TextBuilder().push("B-factors for PDB entry", pdb_id, ",", view_phrase(view), ".").build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["entry", "bfactor"],
    )


def for_geometry_validation(pdb_id: str, view: ViewType = None) -> ImageSpec:
    description = TextBuilder()
    description.push("The deposited structure of PDB entry", B_, pdb_id, _B, "coloured by geometry validation",
                     ",", view_phrase(view), ".")
    description.push(
        "Residues are coloured by the number of geometry outliers: green – no outliers, "
        "yellow – one outlier yellow, orange – two outliers, red – three or more outliers."
    )
    return ImageSpec(
        filename=paths.validation_stem(pdb_id, view),
        alt=TextBuilder().push("Geometry outliers in PDB entry", pdb_id, ",", view_phrase(view), ".").build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["validation", "geometry", "deposited"],
    )


def for_plddt(afdb_id: str, view: ViewType = None) -> ImageSpec:
    description = TextBuilder()
    description.push("The predicted structure of", B_, afdb_id, _B, "coloured by pLDDT confidence score",
                     ",", view_phrase(view), ".")
    description.push(
        "Residues are coloured by pLDDT values: dark blue – very high (90–100), light blue – "
        "confident (70–90), yellow – low (50–70), orange – very low (0–50)."
    )
    return ImageSpec(
        filename=paths.plddt_stem(afdb_id, view),
        alt=TextBuilder().push("Predicted structure of", afdb_id, ",", view_phrase(view), ".").build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=afdb_id,
        view=view,
        section=["entry", "plddt"],
    )


def for_highlighted_entity(context: StructureContext, entity_id: str, view: ViewType = None) -> ImageSpec:
    pdb_id, assembly_id = context.pdb_id, context.assembly_id
    n_copies = context.entity_info[entity_id].n_instances
    name = entity_name(context, entity_id)
    description = TextBuilder()
    description.push(structure_phrase(context), "of PDB entry", B_, pdb_id, _B,
                     "contains", count_noun(n_copies, "cop|y|ies"), "of", B_, name, _B, ".",
                     capital(view_phrase(view)), ".")
    alt = TextBuilder().push(name, "in PDB entry", pdb_id, ",",
                             f"assembly {assembly_id}" if assembly_id else "", ",", view_phrase(view), ".")
    return ImageSpec(
        filename=paths.entity_stem(pdb_id, entity_id, view),
        alt=alt.build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["entity", entity_id],
    )


def for_domain(
    context: StructureContext,
    source: str,
    family_id: str,
    family_name: str,
    entity_id: str,
    chain_id: str,
    auth_chain_id: str,
    total_copies: int,
    shown_copies: int,
    out_of_range_copies: int = 0,
    view: ViewType = None,
) -> ImageSpec:
    """Captions for ``domain`` images.

    Args:
        total_copies:         Domain instances in the whole deposited model.
        shown_copies:         Domain instances in the shown chain.
        out_of_range_copies:  Shown instances lying completely outside the
                              observed residue ranges (thus invisible).
    """
    pdb_id = context.pdb_id
    name = entity_name(context, entity_id)
    if out_of_range_copies > 0:
        if shown_copies > 1:
            out_of_range = "(some of the domains are out of the observed residue ranges!)"
        else:
            out_of_range = "(this domain is out of the observed residue ranges!)"
    else:
        out_of_range = ""
    description = TextBuilder()
    description.push("The deposited structure of PDB entry", B_, pdb_id, _B,
                     "contains", count_noun(total_copies, "cop|y|ies"), "of", source, "domain",
                     B_, family_id, f"({family_name})", _B, "in", B_, name, _B, ".",
                     "Showing", count_noun(shown_copies, "cop|y|ies"), "in chain",
                     B_, chain_label(chain_id, auth_chain_id), _B, out_of_range, ".",
                     capital(view_phrase(view)), ".")
    return ImageSpec(
        filename=paths.domain_stem(pdb_id, entity_id, auth_chain_id, source, family_id, view),
        alt=description.build_plain_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["entity", entity_id, "database", source, family_id],
    )


def for_ligand_environment(context: StructureContext, ligand_info: LigandInfo, view: ViewType = None) -> ImageSpec:
    pdb_id = context.pdb_id
    n_copies = ligand_info.n_instances_in_entry
    comp_id = ligand_info.comp_id
    name = entity_name(context, ligand_info.entity_id)
    an_instance = "" if n_copies == 1 else "an instance of"
    description = TextBuilder()
    description.push("The binding environment for", an_instance, B_, comp_id, f"({name})", _B,
                     "in PDB entry", B_, pdb_id, _B, ",",
                     "chain", B_, chain_label(ligand_info.chain_id, ligand_info.auth_chain_id), _B, ".",
                     capital(view_phrase(view)), ".",
                     "There", "is" if n_copies == 1 else "are", count_noun(n_copies, "cop|y|ies"),
                     "of", B_, comp_id, _B, "in the deposited model", ".")
    alt = TextBuilder().push("The binding environment for", an_instance, comp_id, "in PDB entry", pdb_id, ",",
                             view_phrase(view), ".")
    return ImageSpec(
        filename=paths.ligand_stem(pdb_id, comp_id, view),
        alt=alt.build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["entry", "ligands", comp_id],
        extras={"entity": ligand_info.entity_id, "number_of_instances": n_copies},
    )


def for_modified_residue(context: StructureContext, modres_info: ModifiedResidueInfo, view: ViewType = None) -> ImageSpec:
    pdb_id, assembly_id = context.pdb_id, context.assembly_id
    comp_id = modres_info.comp_id
    description = TextBuilder()
    description.push(structure_phrase(context), "of PDB entry", B_, pdb_id, _B,
                     "contains", count_noun(modres_info.n_instances, "instance|s"), "of modified residue",
                     B_, comp_id, f"({modres_info.comp_name})", _B, ".",
                     capital(view_phrase(view)), ".")
    alt = TextBuilder().push("Modified residue", comp_id, "in PDB entry", pdb_id, ",",
                             f"assembly {assembly_id}" if assembly_id else "", ",", view_phrase(view), ".")
    return ImageSpec(
        filename=paths.modres_stem(pdb_id, comp_id, view),
        alt=alt.build_text(),
        description=description.build_text(),
        clean_description=description.build_plain_text(),
        entry_id=pdb_id,
        view=view,
        section=["entry", "mod_res", comp_id],
    )


def save_caption(directory: Union[str, Path], spec: ImageSpec) -> Path:
    """Write ``spec`` as ``<filename>.caption.json`` in ``directory``, private fields included."""
    path = Path(paths.image_caption_json(str(directory), spec.filename))
    logger.info("Saving %s", spec.filename)
    write_text_atomic(path, spec.to_json())
    return path


# ---------------------------------------------------------------------------
# Phrases
# ---------------------------------------------------------------------------

def structure_phrase(context: StructureContext) -> str:
    """'The deposited structure' or e.g. 'Homo-tetrameric assembly 1'."""
    if context.assembly_id:
        return f"{capital(homo_hetero_how_many_mer(context.entity_info))}ic assembly {context.assembly_id}"
    return "The deposited structure"


def view_phrase(view: ViewType) -> str:
    """'front view', or '' for no view."""
    return f"{view} view" if view else ""


def how_many_mer(entity_info: Mapping[str, EntityInfo]) -> str:
    """'tetramer', '20-mer' etc. from the number of polymer chains."""
    polymer_count = sum(info.n_instances for info in entity_info.values() if info.type == "polymer")
    return _MER_NAMES.get(polymer_count, f"{polymer_count}-mer")


def homo_hetero_how_many_mer(entity_info: Mapping[str, EntityInfo]) -> str:
    """'homo-tetramer', 'hetero-20-mer', 'monomer' etc."""
    n_types = sum(1 for info in entity_info.values() if info.type == "polymer")
    suffix = how_many_mer(entity_info)
    if suffix == "monomer" or n_types == 0:
        # some entries contain no polymer at all (1aga)
        return suffix
    if n_types == 1:
        return "homo-" + suffix
    return "hetero-" + suffix


def entity_name(context: StructureContext, entity_id: str) -> str:
    """API name of the entity if known, else its description from the structure."""
    names = context.entity_names.get(entity_id)
    if names:
        return names[0]
    return context.entity_info[entity_id].description


def count_noun(count: int, noun_forms: str) -> str:
    """Format a count with the right noun form.

    ``noun_forms`` is "stem", "stem|plural-suffix" or
    "stem|singular-suffix|plural-suffix"::

        >>> count_noun(1, "cop|y|ies"), count_noun(2, "cop|y|ies")
        ('1 copy', '2 copies')
        >>> count_noun(2, "|mouse|mice"), count_noun(2, "sheep")
        ('2 mice', '2 sheep')
    """
    parts = noun_forms.split("|")
    if len(parts) == 1:
        stem, sg, pl = parts[0], "", ""
    elif len(parts) == 2:
        stem, sg, pl = parts[0], "", parts[1]
    elif len(parts) == 3:
        stem, sg, pl = parts
    else:
        raise InvalidNounSpecificationError(noun_forms)
    noun = stem + sg if count == 1 else stem + pl
    return f"{count} {noun}"
