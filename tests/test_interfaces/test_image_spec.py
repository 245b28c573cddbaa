"""Tests for the ImageSpec caption record."""
from __future__ import annotations

import json

from pdbimages.interfaces.image_spec import ImageSpec


class TestImageSpec:
    def test_to_dict_private_fields(self, sample_image_spec):
        d = sample_image_spec.to_dict()
        assert d["_entry_id"] == "1hda"
        assert d["_section"] == ["entry", "ligands", "HEM"]
        assert d["_extras"] == {"entity": "3", "number_of_instances": 4}
        assert "_view" not in d

    def test_to_dict_omits_missing_extras(self):
        spec = ImageSpec(filename="1hda_bfactor", alt="a", description="d",
                         clean_description="d", entry_id="1hda",
                         view="front", section=["entry", "bfactor"])
        d = spec.to_dict()
        assert d["_view"] == "front"
        assert "_extras" not in d

    def test_public_keys_first(self, sample_image_spec):
        keys = list(sample_image_spec.to_dict())
        assert keys[:4] == ["filename", "alt", "description", "clean_description"]

    def test_json_round_trip(self, sample_image_spec):
        spec2 = ImageSpec.from_json(sample_image_spec.to_json())
        assert spec2 == sample_image_spec

    def test_from_dict_without_private_fields(self):
        spec = ImageSpec.from_dict({
            "filename": "x", "alt": "a", "description": "d", "clean_description": "c",
            "_entry_id": "1abc",
        })
        assert spec.view is None
        assert spec.section == []
        assert spec.extras is None

    def test_json_is_valid(self, sample_image_spec):
        assert json.loads(sample_image_spec.to_json())["filename"] == "1hda_ligand_HEM"
