"""Ordering of dotted-integer version identifiers."""

from __future__ import annotations

from update_checker.exceptions import InvalidVersionFormatError


def parse_version(version: str) -> tuple[int, ...]:
    """Parse ``"1.2.10"`` into ``(1, 2, 10)``.

    Trailing zero components are dropped so that ``"1.2"`` and ``"1.2.0"``
    normalize to the same tuple.

    Raises:
        InvalidVersionFormatError: If *version* is not a string, is empty, or
            has an empty or non-numeric component.
    """
    if not isinstance(version, str):
        raise InvalidVersionFormatError(version)
    parts: list[int] = []
    for segment in version.strip().split("."):
        # str.isdigit() accepts superscripts and other non-ASCII digits
        if not segment or not (segment.isascii() and segment.isdigit()):
            raise InvalidVersionFormatError(version)
        parts.append(int(segment))
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str) -> int:
    """Return ``-1``, ``0`` or ``1`` as *a* is lower, equal or higher than *b*."""
    left, right = parse_version(a), parse_version(b)
    return (left > right) - (left < right)


def is_newer(candidate: str, current: str) -> bool:
    """Return ``True`` if *candidate* orders strictly after *current*."""
    return compare_versions(candidate, current) > 0
