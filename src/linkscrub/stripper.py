"""Field stripping: raw rewrites, then removal of query and fragment pairs."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import SplitResult

from linkscrub.redirection import find_redirection, repeatedly_urldecode
from linkscrub.urls import Pair, parse_pairs, parse_url, serialize_pairs, unparse_url


@dataclass(frozen=True, slots=True)
class Cleaned:
    """Result of applying one provider to a URL."""

    url: SplitResult
    redirected: bool = False


def is_full_match(pattern: re.Pattern[str], key: str) -> bool:
    return pattern.fullmatch(key) is not None


def apply_raw_rules(patterns: Sequence[re.Pattern[str]], text: str) -> str:
    """Delete every match of each pattern, left to right, each on the previous output."""
    for pattern in patterns:
        text = pattern.sub("", text)
    return text


def drop_matching(pairs: list[Pair], patterns: Sequence[re.Pattern[str]]) -> list[Pair]:
    for pattern in patterns:
        pairs = [(key, value) for key, value in pairs if not is_full_match(pattern, key)]
    return pairs


def remove_fields(
    url: SplitResult,
    *,
    redirections: Sequence[re.Pattern[str]],
    raw_rules: Sequence[re.Pattern[str]],
    field_patterns: Sequence[re.Pattern[str]],
) -> Cleaned:
    text = unparse_url(url)

    target = find_redirection(redirections, text)
    if target is not None:
        return Cleaned(parse_url(repeatedly_urldecode(target)), redirected=True)

    rewritten = apply_raw_rules(raw_rules, text)
    if rewritten != text:
        url = parse_url(rewritten)

    query = drop_matching(parse_pairs(url.query), field_patterns)
    fragment = drop_matching(parse_pairs(url.fragment), field_patterns)

    return Cleaned(url._replace(query=serialize_pairs(query), fragment=serialize_pairs(fragment)))
