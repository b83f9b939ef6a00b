"""
Identity and code generation.

Two kinds of identifiers live in a survey document:
    - id:   opaque, generator-assigned, never reused, never shown
    - code: human-readable, user-editable, unique across the document

This module generates both. It holds no registry: uniqueness of codes is
always checked against the codes passed in.
"""

import random
import string
import time
from typing import Iterable

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """
    Generate a process-unique opaque identifier.

    Millisecond timestamp plus a random base36 suffix. Collisions are
    negligible, not impossible.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"item_{int(time.time() * 1000)}_{suffix}"


def generate_unique_code(existing_codes: Iterable[str], prefix: str = "Q") -> str:
    """
    Return `prefix + N` for the smallest positive N not already taken.

    Args:
        existing_codes: Codes already present in the document
        prefix: Code prefix ("Q" for items, "R" rows, "C" columns)

    Returns:
        A code not in `existing_codes`
    """
    taken = set(existing_codes)
    counter = 1
    code = f"{prefix}{counter}"
    while code in taken:
        counter += 1
        code = f"{prefix}{counter}"
    return code
