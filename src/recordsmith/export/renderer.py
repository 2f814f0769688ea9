"""Render records through an export profile into CSV or JSON text."""

import json
import logging
from typing import Iterable, Union

from ..ingest.models import Record
from .encoder import encode_text
from .models import (
    ExportField,
    ExportFormat,
    ExportPayload,
    ExportProfile,
    ExportValidationError,
)

logger = logging.getLogger(__name__)

ROW_TERMINATOR = "\n"


def validate_profile(profile: ExportProfile) -> None:
    """
    Check that a profile can be exported.

    Raises:
        ExportValidationError: listing every problem found
    """
    problems = []
    for position, field in enumerate(profile.fields, start=1):
        if not field.output_name.strip():
            problems.append(f"field {position} has no output name")
        if not field.is_static and not field.source_field:
            label = field.output_name.strip() or f"field {position}"
            problems.append(f"'{label}' is not static and has no source field")
    if problems:
        raise ExportValidationError(problems, profile_name=profile.name)


def resolve_value(field: ExportField, record: Record) -> str:
    """Value of one output field for one record."""
    if field.is_static:
        return field.static_value or ""
    if field.source_field and field.source_field in record:
        return record[field.source_field] or ""
    return ""


def quote_cell(value: str) -> str:
    """Wrap a cell in double quotes, doubling inner quotes."""
    return '"' + value.replace('"', '""') + '"'


class ExportRenderer:
    """Applies an export profile to records."""

    def __init__(self, profile: ExportProfile):
        self.profile = profile

    def render_csv(self, records: Iterable[Record]) -> str:
        """Header row of output names, then one quoted row per record."""
        separator = self.profile.separator
        rows = [separator.join(quote_cell(f.output_name) for f in self.profile.fields)]
        for record in records:
            rows.append(
                separator.join(quote_cell(resolve_value(f, record)) for f in self.profile.fields)
            )
        return ROW_TERMINATOR.join(rows)

    def render_json(self, records: Iterable[Record]) -> str:
        """Pretty-printed JSON array, one object per record, keys in profile order."""
        objects = []
        for record in records:
            output = {}
            for field in self.profile.fields:
                output[field.output_name] = resolve_value(field, record)
            objects.append(output)
        return json.dumps(objects, indent=2, ensure_ascii=False)

    def render_text(self, records: Iterable[Record], fmt: ExportFormat) -> str:
        if fmt == ExportFormat.CSV:
            return self.render_csv(records)
        return self.render_json(records)

    def render(self, records: list[Record], fmt: Union[ExportFormat, str]) -> ExportPayload:
        """Validate the profile, render the text and encode it to bytes."""
        fmt = ExportFormat(fmt)
        validate_profile(self.profile)
        text = self.render_text(records, fmt)
        payload = encode_text(text, fmt, self.profile.encoding)
        logger.info(
            f"Exported {len(records)} records with profile '{self.profile.name}' "
            f"as {fmt.value} ({len(payload.content)} bytes, charset {payload.charset})"
        )
        return payload


def render_export(
    profile: ExportProfile, records: list[Record], fmt: Union[ExportFormat, str]
) -> ExportPayload:
    """Render records through a profile into encoded CSV or JSON."""
    return ExportRenderer(profile).render(records, fmt)
