"""Helpers for creating, copying, importing and naming export profiles."""

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from ..ingest.models import FileEncoding
from .models import ExportField, ExportProfile, ProfileImportError, new_id

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "Default (all columns)"
DEFAULT_PROFILE_COMMENT = "Automatically generated profile that exports every column."
DEFAULT_SEPARATOR = ";"

_UNSAFE_NAME_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RUN = re.compile(r"\s+")

# Keys every imported profile object must carry
_REQUIRED_KEYS = ("id", "name", "fields", "csvSeparator")


def default_profile(headers: list[str], name: str = DEFAULT_PROFILE_NAME) -> ExportProfile:
    """A profile that maps every non-blank header 1:1 to an output column."""
    return ExportProfile(
        name=name,
        fields=[
            ExportField(output_name=header, source_field=header)
            for header in headers
            if header.strip()
        ],
        separator=DEFAULT_SEPARATOR,
        comment=DEFAULT_PROFILE_COMMENT,
    )


def duplicate_profile(profile: ExportProfile) -> ExportProfile:
    """Copy a profile with fresh ids and a ' (Copy)' suffix on its name."""
    copy = profile.model_copy(deep=True)
    copy.id = new_id("profile")
    copy.name = f"{profile.name} (Copy)"
    for field in copy.fields:
        field.id = new_id("field")
    return copy


def load_profiles(text: str) -> list[ExportProfile]:
    """
    Parse a profile bundle: a JSON array of profile objects.

    Raises:
        ProfileImportError: if the text is not a valid bundle
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProfileImportError(f"Profile bundle is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ProfileImportError("Profile bundle must be a JSON array of profiles.")

    profiles = []
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ProfileImportError(f"Profile {position} is not an object.")
        missing = [key for key in _REQUIRED_KEYS if key not in item]
        if missing:
            raise ProfileImportError(
                f"Profile {position} is missing required keys: {', '.join(missing)}"
            )
        if not item["id"] or not str(item["name"]).strip():
            raise ProfileImportError(f"Profile {position} needs a non-empty id and name.")
        if not isinstance(item["fields"], list) or not isinstance(item["csvSeparator"], str):
            raise ProfileImportError(
                f"Profile {position} needs a list of fields and a string separator."
            )
        if not item.get("csvEncoding"):
            item = {**item, "csvEncoding": FileEncoding.UTF_8.value}
        if item.get("comment") == "":
            item = {**item, "comment": None}
        try:
            profiles.append(ExportProfile.model_validate(item))
        except ValidationError as e:
            raise ProfileImportError(f"Profile {position} is invalid: {e}") from e

    logger.info(f"Imported {len(profiles)} export profile(s)")
    return profiles


def dump_profiles(profiles: list[ExportProfile]) -> str:
    """Serialize profiles to a bundle that load_profiles accepts."""
    return json.dumps(
        [p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in profiles],
        indent=2,
        ensure_ascii=False,
    )


def download_file_name(
    source_file_name: Optional[str], profile_name: str, extension: str
) -> str:
    """
    Build the download name for an export.

    The source name loses its last extension (falling back to "export"), and
    the profile name keeps only word characters, spaces and hyphens, with
    whitespace runs turned into underscores.
    """
    base = "export"
    if source_file_name:
        dot = source_file_name.rfind(".")
        base = source_file_name[:dot] if dot > 0 else source_file_name
    safe_profile = _WHITESPACE_RUN.sub("_", _UNSAFE_NAME_CHARS.sub("", profile_name))
    return f"{base}_{safe_profile}.{extension}"
