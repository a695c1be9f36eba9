"""
Sanitisation helpers for user-authored text and uploaded file names.
"""

import logging
import os
import re
from typing import Optional

import bleach

logger = logging.getLogger(__name__)

# Topic titles and descriptions are rendered as plain text by the client
ALLOWED_TAGS: list[str] = []


def sanitize_text(value: Optional[str], max_length: int = 10000) -> str:
    """
    Strip markup from user-authored text and trim surrounding whitespace.

    Args:
        value: Raw text from the request
        max_length: Maximum allowed length after cleaning

    Returns:
        Cleaned text ("" for None)

    Raises:
        ValueError: If the cleaned text is too long
    """
    if value is None:
        return ""

    cleaned = bleach.clean(str(value), tags=ALLOWED_TAGS, attributes={}, strip=True).strip()

    if len(cleaned) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return cleaned


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent directory traversal and other attacks

    Args:
        filename: Original filename

    Returns:
        Safe filename
    """
    # Remove path components
    filename = os.path.basename(filename.replace("\\", "/"))

    # Remove or replace dangerous characters
    filename = re.sub(r"[^\w\s\-\.]", "", filename)

    # Remove leading/trailing dots and spaces
    filename = filename.strip(". ")

    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[: 255 - len(ext)] + ext

    if not filename:
        logger.warning("⚠️ Filename sanitised to empty string")
        filename = "upload"

    return filename
