"""Shared fixtures for metadata-gateway tests.

``fixtures/api`` mirrors the PDBe API routes for entry 1hda, so a
``file://`` base URL serves it without network access.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from pdbimages.api import PDBeAPI

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def local_api():
    return PDBeAPI(f"file://{FIXTURES / 'api'}")


@pytest.fixture
def http_api():
    return PDBeAPI("https://www.ebi.ac.uk/pdbe/api/")


@pytest.fixture
def summary_payload():
    def _make(preferred_flags):
        return {"1abc": [{
            "experimental_method": ["Solution NMR"],
            "assemblies": [
                {"assembly_id": str(i + 1), "form": "homo", "preferred": flag, "name": "monomer"}
                for i, flag in enumerate(preferred_flags)
            ],
        }]}
    return _make
