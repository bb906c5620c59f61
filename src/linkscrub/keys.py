"""Domain keys: cheap literal prefilters derived from provider URL patterns.

A provider whose pattern starts with a plain domain such as
``^https?://(?:[a-z0-9-]+\\.)*?example\\.com`` can only match URLs whose host
contains the label ``example``. Comparing that key against the labels of a URL
rules out most providers before any regex runs.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

PATTERN_PREFIX = r"^https?://(?:[a-z0-9-]+\.)*?"
PATTERN_DELIMITER = r"\."
URL_DELIMITER = "."


def _is_allowed_label(label: str) -> bool:
    return bool(label) and all(c.isascii() and (c.islower() or c.isdigit() or c == "-") for c in label)


def _iter_labels(text: str, delimiter: str) -> Iterator[str]:
    """Yield delimiter-terminated pieces of text until one is not a plain label.

    A trailing piece with no delimiter after it is never yielded.
    """
    start = 0
    while True:
        end = text.find(delimiter, start)
        if end == -1:
            return
        label = text[start:end]
        if not _is_allowed_label(label):
            return
        yield label
        start = end + len(delimiter)


def domain_key_from_pattern(pattern: str) -> str | None:
    normalized = pattern.replace(r"\/", "/").replace(r"\-", "-")
    if not normalized.startswith(PATTERN_PREFIX):
        return None
    return next(_iter_labels(normalized[len(PATTERN_PREFIX):], PATTERN_DELIMITER), None)


@dataclass(frozen=True, slots=True)
class DomainLabels:
    """Restartable view over the leading host labels of a URL."""

    url: str

    def __iter__(self) -> Iterator[str]:
        rest = self.url
        if not rest.startswith("http"):
            return iter(())
        rest = rest[len("http"):]
        if rest.startswith("s"):
            rest = rest[1:]
        if not rest.startswith("://"):
            return iter(())
        return _iter_labels(rest[len("://"):], URL_DELIMITER)

    def __contains__(self, label: object) -> bool:
        return any(candidate == label for candidate in self)


def keys_from_url(url: str) -> DomainLabels:
    return DomainLabels(url)
