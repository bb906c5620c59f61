"""Redirection wrappers: find the embedded target and decode it."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import unquote

from linkscrub.errors import DecodeError, RedirectionHasNoCapturingGroup

# Real targets settle in one or two passes; anything near this is hostile input.
MAX_DECODE_PASSES = 32


def find_redirection(patterns: Iterable[re.Pattern[str]], url: str) -> str | None:
    """Return the first capture group of the first redirection pattern that matches url."""
    for pattern in patterns:
        match = pattern.search(url)
        if match is None:
            continue
        target = match.group(1) if pattern.groups else None
        if target is None:
            raise RedirectionHasNoCapturingGroup(pattern.pattern)
        return target
    return None


def repeatedly_urldecode(value: str) -> str:
    """Percent-decode value until it stops changing, then make sure it has a scheme."""
    current = value
    for _ in range(MAX_DECODE_PASSES):
        try:
            decoded = unquote(current, errors="strict")
        except UnicodeDecodeError as exc:
            raise DecodeError(current, str(exc)) from exc
        if decoded == current:
            return decoded if decoded.startswith("http") else f"http://{decoded}"
        current = decoded
    raise DecodeError(value, f"still changing after {MAX_DECODE_PASSES} decode passes")
