"""Decode uploaded file bytes into text using the chosen encoding tag."""

import logging
from typing import Union

from .models import FileEncoding

logger = logging.getLogger(__name__)

# Python codec for each recognized encoding tag.
# utf-8-sig drops a leading byte-order-mark the way browsers do.
CODECS: dict[FileEncoding, str] = {
    FileEncoding.UTF_8: "utf-8-sig",
    FileEncoding.ISO_8859_1: "latin-1",
    FileEncoding.ISO_8859_2: "iso8859_2",
    FileEncoding.WINDOWS_1250: "cp1250",
    FileEncoding.X_MAC_CE: "mac_latin2",
}


def coerce_encoding(encoding: Union[str, FileEncoding, None]) -> FileEncoding:
    """
    Resolve an encoding tag, matching case-insensitively.

    Raises ValueError for tags outside the recognized set.
    """
    if encoding is None:
        return FileEncoding.UTF_8
    if isinstance(encoding, FileEncoding):
        return encoding
    wanted = encoding.strip().lower()
    for candidate in FileEncoding:
        if candidate.value.lower() == wanted:
            return candidate
    raise ValueError(
        f"Unsupported encoding '{encoding}'. "
        f"Expected one of: {', '.join(e.value for e in FileEncoding)}"
    )


def decode_bytes(raw: bytes, encoding: Union[str, FileEncoding, None] = None) -> str:
    """
    Decode raw file bytes to text.

    Undecodable bytes become U+FFFD rather than failing the load, so a wrong
    encoding choice shows up as garbled values the user can spot and fix.
    """
    tag = coerce_encoding(encoding)
    text = raw.decode(CODECS[tag], errors="replace")
    if "\ufffd" in text:
        logger.warning(f"Input contained bytes not valid in {tag.value}; replaced with U+FFFD")
    return text
