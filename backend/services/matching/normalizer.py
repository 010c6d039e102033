"""Attribute normalization: canonical comparable form for skills and interests.

Matching always compares the canonical (trimmed, lower-cased) form while the
original spelling is kept for display.
"""

from typing import Iterable, NamedTuple


class NormalizedAttribute(NamedTuple):
    canonical: str
    display: str


def canonical(value: str) -> str:
    return value.strip().lower()


def normalize_attributes(raw: Iterable[str] | None) -> list[NormalizedAttribute]:
    """Normalize raw attribute strings, dropping blanks and collapsing duplicates.

    Duplicates are detected on the canonical form; the first spelling wins.
    """
    if not raw:
        return []

    seen: set[str] = set()
    result: list[NormalizedAttribute] = []
    for value in raw:
        if not isinstance(value, str):
            continue
        key = canonical(value)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(NormalizedAttribute(canonical=key, display=value.strip()))
    return result


def clean_attributes(raw: Iterable[str] | None) -> list[str]:
    """Return display spellings with blanks and case-insensitive duplicates removed."""
    return [attr.display for attr in normalize_attributes(raw)]


def strip_blank(raw: Iterable[str] | None) -> list[str]:
    """Trim values and drop blanks without deduplicating (order preserved)."""
    if not raw:
        return []
    return [v.strip() for v in raw if isinstance(v, str) and v.strip()]


def attribute_set(*groups: Iterable[str] | None) -> set[str]:
    """Union of canonical forms across one or more attribute collections."""
    result: set[str] = set()
    for group in groups:
        result.update(attr.canonical for attr in normalize_attributes(group))
    return result
