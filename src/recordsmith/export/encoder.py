"""Turn rendered export text into bytes for the profile's encoding."""

import logging
from typing import Union

from ..ingest.decoding import coerce_encoding
from ..ingest.models import FileEncoding
from .models import ExportFormat, ExportPayload

logger = logging.getLogger(__name__)

MEDIA_TYPES: dict[ExportFormat, str] = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
}


def transliterate_latin1(text: str) -> bytes:
    """Code points up to 255 become single bytes; anything above becomes '?'."""
    return text.encode("latin-1", errors="replace")


def encode_text(
    text: str,
    fmt: Union[ExportFormat, str],
    encoding: Union[FileEncoding, str, None] = FileEncoding.UTF_8,
) -> ExportPayload:
    """
    Encode export text.

    CSV in UTF-8 gets a byte-order-mark so spreadsheet tools pick the right
    charset; CSV in ISO-8859-1 is transliterated byte for byte. Every other
    combination is written as UTF-8 and only labelled with the requested
    charset. JSON is always UTF-8.
    """
    fmt = ExportFormat(fmt)
    tag = coerce_encoding(encoding)
    media_type = MEDIA_TYPES[fmt]

    if fmt == ExportFormat.JSON:
        return ExportPayload(
            content=text.encode("utf-8"),
            format=fmt,
            charset=FileEncoding.UTF_8.value,
            media_type=media_type,
        )

    if tag == FileEncoding.UTF_8:
        content = text.encode("utf-8-sig")
    elif tag == FileEncoding.ISO_8859_1:
        content = transliterate_latin1(text)
    else:
        # TODO: byte-level transcoding for ISO-8859-2, Windows-1250 and x-mac-ce
        logger.warning(
            f"Encoding {tag.value} is a charset label only; writing UTF-8 bytes"
        )
        content = text.encode("utf-8")

    return ExportPayload(content=content, format=fmt, charset=tag.value, media_type=media_type)
