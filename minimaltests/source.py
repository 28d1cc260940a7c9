"""Read and decode the source file a metric tree describes."""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "shift_jis"

_BOMS = (codecs.BOM_UTF8, codecs.BOM_UTF16_BE, codecs.BOM_UTF16_LE)
_SNIFF_BYTES = 64


def read_source_bytes(path: str | Path) -> bytes | None:
    """Read a source file, or None when it is near-empty or looks binary.

    A leading byte order mark is dropped and trailing newlines are
    collapsed to exactly one.
    """
    data = Path(path).read_bytes()
    if len(data) <= 3:
        return None

    for bom in _BOMS:
        if data.startswith(bom):
            data = data[len(bom):]
            break

    # The last sniffed char may be cut in the middle of a UTF-8 sequence.
    head = data[:_SNIFF_BYTES].decode("utf-8", errors="replace")[:-1]
    if "\ufffd" in head:
        return None

    stripped = data.rstrip(b"\n")
    return stripped + b"\n"


def decode_source(data: bytes) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        return data.decode(FALLBACK_ENCODING)
    except UnicodeDecodeError:
        return None


def read_source_text(path: str | Path) -> str | None:
    """Return the decoded source text, or None if it cannot be used."""
    try:
        data = read_source_bytes(path)
    except OSError as error:
        logger.debug("cannot read source %s: %s", path, error)
        return None
    if data is None:
        logger.debug("source %s is empty or binary", path)
        return None

    text = decode_source(data)
    if text is None:
        logger.debug("source %s is neither UTF-8 nor %s", path, FALLBACK_ENCODING)
    return text
