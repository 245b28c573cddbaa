"""PDBImages planning layer — deterministic image catalogue for macromolecular structures.

Decides *what* images must exist for a PDB / AlphaFoldDB entry and *how* each
one is framed, coloured and captioned, independently of pixel rendering.

Subpackages:
    interfaces  Stable data types (entities, domains, caption records, config).
    api         PDBe REST API gateway.
    structure   Domain resolution, orientation, camera, colour assignment.
    captions    Caption text assembly, per-image-type builders, manifest collection.
    pipeline    Output planning, naming conventions, CLI orchestration.
    helpers     Small shared utilities.
"""

__version__ = "0.3.0"
