"""URL parsing and form-encoded pair helpers."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import SplitResult, parse_qsl, quote, urlencode, urlsplit, urlunsplit

from linkscrub.errors import InvalidUrl

# Schemes that cannot exist without a host.
HOST_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

# A bare key must not gain "&", "=" or "+" on output, otherwise re-parsing it splits or alters it.
BARE_KEY_SAFE = "!$'()*,;:@/?~-._"

Pair = tuple[str, str]


def parse_url(text: str) -> SplitResult:
    """Parse text into an absolute URL, lowercasing scheme and host."""
    candidate = text.strip()
    try:
        parts = urlsplit(candidate)
        # urllib only validates the port when it is read
        _ = parts.port
    except ValueError as exc:
        raise InvalidUrl(text, str(exc)) from exc

    if not parts.scheme:
        raise InvalidUrl(text, "relative URL without a scheme")
    scheme = parts.scheme.lower()
    if scheme in HOST_SCHEMES and not parts.hostname:
        raise InvalidUrl(text, "empty host")

    netloc = parts.netloc
    if netloc:
        userinfo, at, hostport = netloc.rpartition("@")
        netloc = f"{userinfo}{at}{hostport.lower()}"

    path = parts.path
    if scheme in ("http", "https") and not path:
        path = "/"

    return SplitResult(scheme, netloc, path, parts.query, parts.fragment)


def unparse_url(url: SplitResult) -> str:
    return urlunsplit(url)


def parse_pairs(text: str) -> list[Pair]:
    """Form-decode a query or fragment into ordered (key, value) pairs."""
    if not text:
        return []
    return parse_qsl(text, keep_blank_values=True)


def serialize_pairs(pairs: Iterable[Pair]) -> str:
    """Serialize surviving pairs; an empty result means the component is absent.

    A lone pair with an empty value is written as the bare key, which keeps
    fragment anchors like ``#section`` intact.
    """
    pairs = list(pairs)
    if not pairs:
        return ""
    if len(pairs) == 1 and pairs[0][1] == "":
        return quote(pairs[0][0], safe=BARE_KEY_SAFE)
    return urlencode(pairs)
