"""Tests for export rendering and encoding."""

import json
import logging

import pytest

from recordsmith.export import (
    ExportField,
    ExportFormat,
    ExportProfile,
    ExportRenderer,
    ExportValidationError,
    default_profile,
    encode_text,
    render_export,
    resolve_value,
    transliterate_latin1,
    validate_profile,
)
from recordsmith.export.renderer import quote_cell
from recordsmith.ingest import FileEncoding, parse_bytes

BOM = b"\xef\xbb\xbf"


class TestValueResolution:
    """Test resolving single cells."""

    def test_static_value(self):
        """Test static fields ignore the record."""
        field = ExportField(output_name="C", is_static=True, static_value="X")
        assert resolve_value(field, {"C": "other"}) == "X"

    def test_static_without_value(self):
        """Test a static field without a value renders empty."""
        field = ExportField(output_name="C", is_static=True)
        assert resolve_value(field, {}) == ""

    def test_mapped_and_absent_source(self):
        """Test mapped fields read the source and absent sources render empty."""
        field = ExportField(output_name="ID", source_field="Name")
        assert resolve_value(field, {"Name": "Ann"}) == "Ann"
        assert resolve_value(field, {"Other": "Ann"}) == ""

    def test_quote_cell(self):
        """Test cells are quoted with inner quotes doubled."""
        assert quote_cell('say "hi"') == '"say ""hi"""'
        assert quote_cell("") == '""'


class TestValidation:
    """Test profile validation before export."""

    def test_valid_profile(self, id_const_profile):
        """Test a valid profile passes."""
        validate_profile(id_const_profile)

    def test_reports_every_problem(self):
        """Test all problems are listed in one error."""
        profile = ExportProfile(
            name="Bad",
            fields=[
                ExportField(output_name=" ", source_field="a"),
                ExportField(output_name="B"),
            ],
        )

        with pytest.raises(ExportValidationError) as exc_info:
            validate_profile(profile)

        error = exc_info.value
        assert error.problems == [
            "field 1 has no output name",
            "'B' is not static and has no source field",
        ]
        assert error.profile_name == "Bad"
        assert str(error).startswith("Export profile 'Bad' is invalid: ")

    def test_render_validates(self):
        """Test rendering refuses an invalid profile."""
        profile = ExportProfile(name="Bad", fields=[ExportField(output_name="")])
        with pytest.raises(ExportValidationError):
            render_export(profile, [{"a": "1"}], "csv")


class TestRenderer:
    """Test rendering text."""

    def test_render_csv(self, id_const_profile, people_records):
        """Test CSV has a quoted header row and one row per record."""
        text = ExportRenderer(id_const_profile).render_csv(people_records)
        assert text == '"ID";"Const"\n"Ann";"X"\n"Bo";"X"'

    def test_render_csv_without_records(self, id_const_profile):
        """Test an empty record list yields only the header row."""
        assert ExportRenderer(id_const_profile).render_csv([]) == '"ID";"Const"'

    def test_render_csv_custom_separator(self, id_const_profile, people_records):
        """Test the profile separator is used."""
        profile = id_const_profile.model_copy(update={"separator": "\t"})
        text = ExportRenderer(profile).render_csv(people_records[:1])
        assert text == '"ID"\t"Const"\n"Ann"\t"X"'

    def test_render_json(self, id_const_profile, people_records):
        """Test JSON keeps profile order and is pretty-printed."""
        text = ExportRenderer(id_const_profile).render_json(people_records)
        data = json.loads(text)

        assert data == [{"ID": "Ann", "Const": "X"}, {"ID": "Bo", "Const": "X"}]
        assert list(data[0].keys()) == ["ID", "Const"]
        assert '\n  {\n    "ID": "Ann"' in text


class TestRenderExport:
    """Test the full render and encode path."""

    def test_csv_utf8_has_bom(self, id_const_profile):
        """Test UTF-8 CSV starts with a byte-order-mark."""
        payload = render_export(id_const_profile, [{"Name": "Ann"}], ExportFormat.CSV)

        assert payload.content == BOM + '"ID";"Const"\n"Ann";"X"'.encode("utf-8")
        assert payload.charset == "UTF-8"
        assert payload.content_type == "text/csv;charset=UTF-8"
        assert payload.extension == "csv"
        assert bytes(payload) == payload.content

    def test_json_is_plain_utf8(self, id_const_profile):
        """Test JSON output has no byte-order-mark."""
        payload = render_export(id_const_profile, [{"Name": "Zoë"}], "json")

        assert not payload.content.startswith(BOM)
        assert json.loads(payload.content.decode("utf-8")) == [{"ID": "Zoë", "Const": "X"}]
        assert payload.content_type == "application/json;charset=UTF-8"
        assert payload.extension == "json"

    def test_csv_latin1_transliterates(self, id_const_profile):
        """Test ISO-8859-1 CSV maps characters above 255 to '?'."""
        profile = id_const_profile.model_copy(update={"encoding": FileEncoding.ISO_8859_1})
        payload = render_export(profile, [{"Name": "Jürgen €"}], "csv")

        assert payload.content == b'"ID";"Const"\n"J\xfcrgen ?";"X"'
        assert payload.charset == "ISO-8859-1"

    def test_csv_label_only_encoding(self, id_const_profile, caplog):
        """Test other encodings write UTF-8 bytes under the requested label."""
        profile = id_const_profile.model_copy(update={"encoding": FileEncoding.WINDOWS_1250})
        with caplog.at_level(logging.WARNING):
            payload = render_export(profile, [{"Name": "Łódź"}], "csv")

        assert payload.content == '"ID";"Const"\n"Łódź";"X"'.encode("utf-8")
        assert payload.charset == "Windows-1250"
        assert "charset label only" in caplog.text

    def test_json_ignores_profile_encoding(self, id_const_profile):
        """Test JSON is UTF-8 whatever encoding the profile names."""
        profile = id_const_profile.model_copy(update={"encoding": FileEncoding.ISO_8859_1})
        payload = render_export(profile, [{"Name": "€"}], "json")

        assert payload.charset == "UTF-8"
        assert "€".encode("utf-8") in payload.content


class TestEncoder:
    """Test the encoding stage on its own."""

    def test_transliterate_latin1(self):
        """Test code points above 255 become '?'."""
        assert transliterate_latin1("ÿ€😀") == b"\xff??"

    def test_encode_text_default_encoding(self):
        """Test UTF-8 is the default CSV encoding."""
        payload = encode_text("a", "csv")
        assert payload.content == BOM + b"a"

    def test_encode_text_unknown_encoding(self):
        """Test an unknown encoding tag is rejected."""
        with pytest.raises(ValueError):
            encode_text("a", "csv", "KOI8-R")


class TestCsvRoundTrip:
    """Test that exported CSV loads back into the same records."""

    RECORDS = [
        {"Name": "Zoë", "Note": " padded "},
        {"Name": "Bo", "Note": ""},
        {"Name": "Ann", "Note": "x, y"},
    ]

    @pytest.mark.parametrize(
        "separator,encoding",
        [
            (";", FileEncoding.UTF_8),
            ("|", FileEncoding.UTF_8),
            ("\t", FileEncoding.ISO_8859_1),
        ],
    )
    def test_one_to_one_profile_round_trip(self, separator, encoding):
        """Test a 1:1 profile exported to CSV re-parses to the same records."""
        profile = default_profile(["Name", "Note"]).model_copy(
            update={"separator": separator, "encoding": encoding}
        )
        payload = render_export(profile, self.RECORDS, "csv")

        result = parse_bytes(
            payload.content, "people.csv", separator, encoding, "firstLineIsHeader"
        )

        assert result.headers == ["Name", "Note"]
        assert result.records == self.RECORDS

    def test_auto_detection_round_trip(self):
        """Test the exported file is recognized without any load options."""
        profile = default_profile(["Name", "Note"])
        payload = render_export(profile, self.RECORDS, "csv")

        result = parse_bytes(payload.content, "people.csv")

        assert result.detection.separator == ";"
        assert result.records == self.RECORDS

    def test_embedded_quotes_do_not_round_trip(self):
        """Test quotes inside values come back doubled after one quote layer is stripped."""
        profile = default_profile(["Name", "Note"])
        payload = render_export(profile, [{"Name": "Ann", "Note": 'say "hi'}], "csv")

        result = parse_bytes(payload.content, "people.csv", ";", "UTF-8", "firstLineIsHeader")

        assert result.records == [{"Name": "Ann", "Note": 'say ""hi'}]
