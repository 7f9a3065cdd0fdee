"""
File intake: turn an uploaded file into the text the parser consumes.

Rules:
- Only `.csv` files or `text/csv` uploads are accepted.
- Decode as UTF-8 (BOM stripped); fall back to charset-normalizer's best guess.
- Normalize CRLF/CR line endings to LF.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from charset_normalizer import from_bytes

from .errors import UnsupportedFile, UploadTooLarge
from .rules import ACCEPTED_EXTENSIONS, ACCEPTED_MEDIA_TYPES

logger = logging.getLogger(__name__)


def is_accepted_file(filename: Optional[str], content_type: Optional[str]) -> bool:
    if filename and filename.lower().endswith(ACCEPTED_EXTENSIONS):
        return True
    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type in ACCEPTED_MEDIA_TYPES
    return False


def check_file_type(filename: Optional[str], content_type: Optional[str]) -> None:
    if not is_accepted_file(filename, content_type):
        raise UnsupportedFile("Only CSV files are supported")


async def read_upload(file, limit: int) -> bytes:
    """Read at most `limit` bytes of an upload; anything longer is rejected."""
    raw = await file.read(limit + 1)
    if len(raw) > limit:
        raise UploadTooLarge(len(raw), limit)
    return raw


def decode_upload(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to LF-terminated text.

    Rules:
    - Try UTF-8 first; a leading BOM is dropped.
    - If that fails, decode with charset-normalizer's best guess.
    - If nothing decodes cleanly, use UTF-8 with replacement characters and report it.
    """
    decode_used = "utf-8-sig" if raw.startswith(b"\xef\xbb\xbf") else "utf-8"
    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except UnicodeDecodeError:
        decode_fallback = True
        match = from_bytes(raw).best()
        if match is not None:
            decode_used = match.encoding
            text = str(match)
        else:
            decode_used = "utf-8"
            text = raw.decode("utf-8", errors="replace")
        logger.warning("Upload is not valid UTF-8, decoded as %s", decode_used)

    # --- Newline normalization: CRLF/CR -> LF ---
    crlf = text.count("\r\n")
    cr = text.count("\r") - crlf
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "newlines_changed": (crlf > 0) or (cr > 0),
    }
    return text, report
