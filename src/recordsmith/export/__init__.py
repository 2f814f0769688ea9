"""Export profiles: rendering records to CSV/JSON and encoding the output."""

from .models import (
    ExportField,
    ExportFormat,
    ExportPayload,
    ExportProfile,
    ExportValidationError,
    ProfileImportError,
)
from .encoder import encode_text, transliterate_latin1
from .renderer import ExportRenderer, render_export, resolve_value, validate_profile
from .profiles import (
    default_profile,
    duplicate_profile,
    download_file_name,
    dump_profiles,
    load_profiles,
)

__all__ = [
    "ExportField",
    "ExportFormat",
    "ExportPayload",
    "ExportProfile",
    "ExportValidationError",
    "ProfileImportError",
    "encode_text",
    "transliterate_latin1",
    "ExportRenderer",
    "render_export",
    "resolve_value",
    "validate_profile",
    "default_profile",
    "duplicate_profile",
    "download_file_name",
    "dump_profiles",
    "load_profiles",
]
