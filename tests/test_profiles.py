"""Tests for export profile helpers."""

import json

import pytest

from recordsmith.export import (
    ExportProfile,
    ProfileImportError,
    default_profile,
    download_file_name,
    dump_profiles,
    duplicate_profile,
    load_profiles,
)
from recordsmith.export.profiles import DEFAULT_PROFILE_NAME
from recordsmith.ingest import FileEncoding


def _bundle(**overrides) -> str:
    profile = {
        "id": "p1",
        "name": "Partner feed",
        "fields": [
            {"id": "f1", "csvFieldName": "Customer", "tsvHeaderName": "Name", "isStatic": False},
            {"id": "f2", "csvFieldName": "Source", "isStatic": True, "staticValue": "web"},
        ],
        "csvSeparator": ",",
    }
    profile.update(overrides)
    return json.dumps([profile])


class TestDefaultProfile:
    """Test the all-columns profile."""

    def test_maps_every_non_blank_header(self):
        """Test each non-blank header maps to itself."""
        profile = default_profile(["Name", " ", "Age"])

        assert profile.name == DEFAULT_PROFILE_NAME
        assert [(f.output_name, f.source_field) for f in profile.fields] == [
            ("Name", "Name"),
            ("Age", "Age"),
        ]
        assert all(not f.is_static for f in profile.fields)
        assert profile.separator == ";"
        assert profile.encoding == FileEncoding.UTF_8
        assert profile.comment

    def test_custom_name(self):
        """Test the profile name can be overridden."""
        assert default_profile(["a"], name="Mine").name == "Mine"


class TestDuplicateProfile:
    """Test copying profiles."""

    def test_copy_has_fresh_ids(self, id_const_profile):
        """Test the copy gets new ids and a suffixed name."""
        copy = duplicate_profile(id_const_profile)

        assert copy.id != id_const_profile.id
        assert copy.name == "Test (Copy)"
        assert [f.id for f in copy.fields] != [f.id for f in id_const_profile.fields]
        assert [f.output_name for f in copy.fields] == ["ID", "Const"]
        assert copy.fields[1].static_value == "X"

    def test_original_is_untouched(self, id_const_profile):
        """Test duplicating does not mutate the source profile."""
        original_ids = [f.id for f in id_const_profile.fields]
        duplicate_profile(id_const_profile)

        assert id_const_profile.name == "Test"
        assert [f.id for f in id_const_profile.fields] == original_ids


class TestLoadProfiles:
    """Test importing profile bundles."""

    def test_valid_bundle(self):
        """Test a bundle with camelCase keys is imported."""
        profiles = load_profiles(_bundle())

        assert len(profiles) == 1
        profile = profiles[0]
        assert profile.id == "p1"
        assert profile.separator == ","
        assert profile.encoding == FileEncoding.UTF_8
        assert profile.fields[0].output_name == "Customer"
        assert profile.fields[0].source_field == "Name"
        assert profile.fields[1].is_static is True
        assert profile.fields[1].static_value == "web"

    def test_explicit_encoding(self):
        """Test a recognized encoding tag is kept."""
        profile = load_profiles(_bundle(csvEncoding="ISO-8859-2"))[0]
        assert profile.encoding == FileEncoding.ISO_8859_2

    def test_blank_encoding_and_comment(self):
        """Test empty encoding defaults to UTF-8 and an empty comment is dropped."""
        profile = load_profiles(_bundle(csvEncoding="", comment=""))[0]

        assert profile.encoding == FileEncoding.UTF_8
        assert profile.comment is None

    def test_empty_bundle(self):
        """Test an empty array is a valid, empty bundle."""
        assert load_profiles("[]") == []

    @pytest.mark.parametrize(
        "text,message",
        [
            ("not json", "not valid JSON"),
            ('{"id": "p1"}', "must be a JSON array"),
            ("[1]", "Profile 1 is not an object"),
            ('[{"id": "p1", "name": "P", "fields": []}]', "missing required keys: csvSeparator"),
        ],
    )
    def test_malformed_bundles(self, text, message):
        """Test structurally invalid bundles are rejected."""
        with pytest.raises(ProfileImportError, match=message):
            load_profiles(text)

    def test_blank_name(self):
        """Test a profile needs a non-empty name."""
        with pytest.raises(ProfileImportError, match="non-empty id and name"):
            load_profiles(_bundle(name="  "))

    def test_fields_must_be_a_list(self):
        """Test fields must be an array."""
        with pytest.raises(ProfileImportError, match="list of fields"):
            load_profiles(_bundle(fields="Name"))

    def test_unknown_encoding(self):
        """Test an unrecognized encoding tag fails validation."""
        with pytest.raises(ProfileImportError, match="Profile 1 is invalid"):
            load_profiles(_bundle(csvEncoding="EBCDIC"))

    def test_dump_then_load(self, id_const_profile):
        """Test a dumped bundle imports back to the same profiles."""
        text = dump_profiles([id_const_profile])

        assert '"csvSeparator": ";"' in text
        assert load_profiles(text) == [id_const_profile]


class TestDownloadFileName:
    """Test export download names."""

    @pytest.mark.parametrize(
        "source,profile,ext,expected",
        [
            ("people.csv", "My Profile!", "csv", "people_My_Profile.csv"),
            (None, "P", "json", "export_P.json"),
            ("", "P", "csv", "export_P.csv"),
            ("archive.tar.gz", "x", "csv", "archive.tar_x.csv"),
            ("noext", "x", "csv", "noext_x.csv"),
            (".hidden", "x", "csv", ".hidden_x.csv"),
            ("data.tsv", "Feed  v2 - final", "json", "data_Feed_v2_-_final.json"),
        ],
    )
    def test_download_file_name(self, source, profile, ext, expected):
        """Test the source extension is replaced and the profile name cleaned."""
        assert download_file_name(source, profile, ext) == expected


class TestProfileModel:
    """Test profile model defaults."""

    def test_generated_ids_are_unique(self):
        """Test profiles created without ids get distinct ones."""
        first = ExportProfile(name="a")
        second = ExportProfile(name="b")
        assert first.id != second.id
        assert first.id.startswith("profile_")
