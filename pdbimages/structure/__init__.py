"""Structure-level algorithms: domain resolution, orientation, camera, colours."""

from .camera import CameraSnapshot, change_camera_rotation, change_camera_zoom, combine_rotations
from .colors import (
    ANNOTATION_COLORS,
    ENTITY_COLORS,
    LIGAND_COLORS,
    MODRES_COLORS,
    CycleIterator,
    assign_entity_and_unit_colors,
    assign_structure_colors,
    get_sister_color,
)
from .orientation import (
    ROTATION_MATRICES,
    canonical_rotation,
    structure_laying_rotation,
    view_rotations,
)
from .sifts import (
    count_domains,
    select_best_chain_for_domains,
    sort_domains_by_chain,
    sort_domains_by_entity,
)
from .structure_info import (
    count_chain_residues,
    get_chain_info,
    get_elements_in_chains,
    get_entity_info,
    get_ligand_info,
    get_modified_residue_info,
)
