"""
Content type detection.

Classifies uploaded files and pasted text so calendar files go to the
deterministic ICS parser and free text goes to AI extraction.
"""

import re
from collections.abc import Awaitable, Callable

from caretaker.models.content import ContentType, DetectedContent

_EMAIL_HEADER_PATTERNS = [
    re.compile(r"^From:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^Subject:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^Date:.*\d{4}", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^To:", re.IGNORECASE | re.MULTILINE),
]
_MIN_EMAIL_HEADERS = 2


def _extension(file_name: str) -> str:
    return file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""


async def detect_from_file(
    file_name: str,
    mime_type: str,
    read: Callable[[], Awaitable[bytes]],
) -> DetectedContent:
    """
    Detect content type from a file's name and MIME type.

    Images and PDFs are not read (not supported downstream yet). Other
    unrecognised files are read as UTF-8 text when possible.
    """
    extension = _extension(file_name)
    mime_type = mime_type or ""

    def detected(type_: ContentType, content: str = "") -> DetectedContent:
        return DetectedContent(
            type=type_, content=content, file_name=file_name, mime_type=mime_type
        )

    if extension == "ics" or mime_type == "text/calendar":
        return detected("ics", (await read()).decode("utf-8", errors="replace"))

    if extension == "txt" or mime_type == "text/plain":
        return detected("text", (await read()).decode("utf-8", errors="replace"))

    if mime_type.startswith("image/"):
        return detected("image")

    if mime_type == "application/pdf" or extension == "pdf":
        return detected("pdf")

    # Fallback: try to read as text
    try:
        return detected("text", (await read()).decode("utf-8"))
    except UnicodeDecodeError:
        return detected("unknown")


def detect_from_text(text: str) -> DetectedContent:
    """Detect whether pasted text is a calendar file, an email or plain text."""
    trimmed = text.strip()

    if trimmed.startswith("BEGIN:VCALENDAR") or "BEGIN:VEVENT" in trimmed:
        return DetectedContent(type="ics", content=trimmed)

    matched = sum(1 for pattern in _EMAIL_HEADER_PATTERNS if pattern.search(trimmed))
    if matched >= _MIN_EMAIL_HEADERS:
        return DetectedContent(type="email", content=trimmed)

    return DetectedContent(type="text", content=trimmed)


def requires_ai_extraction(content_type: ContentType) -> bool:
    """True for kinds that need the model to interpret them."""
    return content_type in ("text", "email")


def is_supported(content_type: ContentType) -> bool:
    """True for kinds that can currently be processed."""
    return content_type in ("ics", "text", "email")
