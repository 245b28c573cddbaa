"""PDBImages interface contracts — stable data types shared by all stages.

    EntityInfo, LigandInfo, ModifiedResidueInfo
    DomainChunk, DomainRecord
    AssemblyRecord, ModifiedResidueRecord, EntityTypeRecord
    ColorAssignment
    ImageSpec
    RunConfig, ImageSize
    StructureData, EntityRecord, ChainRecord, AtomTable
"""

from .api_records import (
    DEFAULT_ASSEMBLY,
    AssemblyRecord,
    EntityTypeRecord,
    ModifiedResidueRecord,
)
from .color_assignment import Color, ColorAssignment, color_to_hex
from .domain_record import SIFTS_SOURCES, DomainChunk, DomainRecord
from .entity_info import EntityInfo, LigandInfo, ModifiedResidueInfo
from .image_spec import ImageSpec, ViewType
from .run_config import (
    IMAGE_TYPES,
    IMAGE_TYPES_FOR_MODES,
    MODES,
    VIEW_MODES,
    ImageSize,
    RunConfig,
)
from .structure_data import AtomTable, ChainRecord, EntityRecord, StructureData

__all__ = [
    # api_records
    "AssemblyRecord",
    "DEFAULT_ASSEMBLY",
    "EntityTypeRecord",
    "ModifiedResidueRecord",
    # color_assignment
    "Color",
    "ColorAssignment",
    "color_to_hex",
    # domain_record
    "SIFTS_SOURCES",
    "DomainChunk",
    "DomainRecord",
    # entity_info
    "EntityInfo",
    "LigandInfo",
    "ModifiedResidueInfo",
    # image_spec
    "ImageSpec",
    "ViewType",
    # run_config
    "IMAGE_TYPES",
    "IMAGE_TYPES_FOR_MODES",
    "MODES",
    "VIEW_MODES",
    "ImageSize",
    "RunConfig",
    # structure_data
    "AtomTable",
    "ChainRecord",
    "EntityRecord",
    "StructureData",
]
