"""
Short Code Generator

Produces the identifier for a new short link.

Design Decisions:
- Custom codes are returned verbatim; format checks happen in the service layer
- Random codes are the first 8 characters of a UUID4 (32 bits of entropy, hex only)
- No retry on collision: a duplicate code overwrites the existing link unless the
  store is told not to
"""

import uuid
from typing import Optional

GENERATED_CODE_LENGTH = 8


def generate_short_code(custom_code: Optional[str] = None) -> str:
    """
    Return the short code for a new link.

    Args:
        custom_code: Caller-chosen code, used as-is when non-empty

    Returns:
        The custom code, or a random 8-character hex code

    Example:
        generate_short_code("docs") -> "docs"
        generate_short_code() -> "3f9c1a7e"
    """
    if custom_code:
        return custom_code
    return uuid.uuid4().hex[:GENERATED_CODE_LENGTH]
