"""Data models for export profiles and export output."""

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..ingest.models import FileEncoding


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class ExportFormat(str, Enum):
    """Output formats an export can produce."""

    CSV = "csv"
    JSON = "json"


class ExportField(BaseModel):
    """One output column: mapped from a source field or a static constant."""

    # Profile bundles use camelCase keys
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: new_id("field"))
    output_name: str = Field(default="", alias="csvFieldName")
    source_field: Optional[str] = Field(default=None, alias="tsvHeaderName")
    is_static: bool = Field(default=False, alias="isStatic")
    static_value: Optional[str] = Field(default=None, alias="staticValue")


class ExportProfile(BaseModel):
    """A named, reusable mapping from records to an output schema."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: new_id("profile"))
    name: str
    fields: list[ExportField] = Field(default_factory=list)
    separator: str = Field(default=";", alias="csvSeparator")
    encoding: FileEncoding = Field(default=FileEncoding.UTF_8, alias="csvEncoding")
    comment: Optional[str] = None


class ExportPayload(BaseModel):
    """Encoded export output plus what a host needs to offer it as a download."""

    content: bytes
    format: ExportFormat
    charset: str  # Charset label for the Content-Type header
    media_type: str

    @property
    def extension(self) -> str:
        return self.format.value

    @property
    def content_type(self) -> str:
        return f"{self.media_type};charset={self.charset}"

    def __bytes__(self) -> bytes:
        return self.content


class ExportValidationError(Exception):
    """Exception raised when a profile cannot be used for an export."""

    def __init__(self, problems: list[str], profile_name: str = ""):
        self.problems = problems
        self.profile_name = profile_name
        label = f"Export profile '{profile_name}'" if profile_name else "Export profile"
        super().__init__(f"{label} is invalid: " + "; ".join(problems))


class ProfileImportError(Exception):
    """Exception raised when a profile bundle cannot be imported."""

    pass
