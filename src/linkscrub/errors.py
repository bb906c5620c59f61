"""Exception hierarchy for rule loading and URL cleaning."""

from __future__ import annotations


class LinkscrubError(Exception):
    """Base class for every error raised by linkscrub."""


class RuleLoadError(LinkscrubError):
    """A rule source could not be turned into a RuleSet."""

    def __init__(self, provider: str | None, field: str | None, pattern: str | None, reason: str) -> None:
        self.provider = provider
        self.field = field
        self.pattern = pattern
        self.reason = reason
        where = ".".join(part for part in (provider, field) if part)
        message = f"{where}: {reason}" if where else reason
        if pattern is not None:
            message = f"{message} (pattern {pattern!r})"
        super().__init__(message)


class RedirectionHasNoCapturingGroup(LinkscrubError):
    """A redirection pattern matched but yielded no capture group."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"redirection pattern has no capturing group: {pattern!r}")


class InvalidUrl(LinkscrubError):
    """Text does not parse as an absolute URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"invalid URL {url!r}: {reason}")


class DecodeError(LinkscrubError):
    """Percent-decoding a redirect target failed."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"cannot decode {value!r}: {reason}")
