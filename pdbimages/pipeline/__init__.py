"""Output planning: naming conventions, expected files and the ``pdbimages`` CLI."""
