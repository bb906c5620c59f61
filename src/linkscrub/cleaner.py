"""URL cleaner: runs every applicable provider of a rule set over a URL."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from urllib.parse import SplitResult

import structlog

from linkscrub.errors import InvalidUrl, LinkscrubError
from linkscrub.keys import keys_from_url
from linkscrub.rules import RuleSet, load_rules_file
from linkscrub.urls import parse_url, unparse_url

URL_IN_TEXT = re.compile(r"https?://[^\s<>\"'`]+")
TRAILING_PUNCTUATION = ".,;:!?"
CLOSING_BRACKETS = {")": "(", "]": "[", "}": "{"}


def _trim_candidate(candidate: str) -> str:
    """Drop sentence punctuation and unbalanced closing brackets from the end of a URL found in text."""
    while candidate:
        last = candidate[-1]
        if last in TRAILING_PUNCTUATION:
            candidate = candidate[:-1]
        elif last in CLOSING_BRACKETS and candidate.count(last) > candidate.count(CLOSING_BRACKETS[last]):
            candidate = candidate[:-1]
        else:
            break
    return candidate


class UrlCleaner:
    """Cleans URLs against a rule set.

    The rule set is swapped as a whole on reload, so a call that is already
    running keeps the providers it started with.
    """

    def __init__(
        self,
        rule_set: RuleSet,
        *,
        strip_referral_marketing: bool = False,
        use_domain_keys: bool = True,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._rule_set = rule_set
        self.strip_referral_marketing = strip_referral_marketing
        self.use_domain_keys = use_domain_keys
        self.log = log or structlog.get_logger("linkscrub")

    @classmethod
    def from_file(cls, path: str | Path, **kwargs) -> UrlCleaner:
        log = kwargs.get("log")
        return cls(load_rules_file(path, log=log), **kwargs)

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def reload(self, rule_set: RuleSet) -> None:
        self._rule_set = rule_set
        self.log.info("cleaner.reloaded", providers=len(rule_set))

    def clean_url(self, url: SplitResult | str) -> SplitResult:
        rule_set = self._rule_set
        current = parse_url(url) if isinstance(url, str) else url
        text = unparse_url(current)
        labels = frozenset(keys_from_url(text))

        for provider in rule_set:
            key = provider.domain_key()
            if self.use_domain_keys and key is not None and key not in labels:
                continue
            if not provider.match_url(text):
                continue

            result = provider.clean(current, self.strip_referral_marketing)
            if result.redirected:
                self.log.debug("cleaner.redirected", provider=provider.name, url=text, target=unparse_url(result.url))
                return result.url
            if result.url != current:
                self.log.debug("cleaner.provider_applied", provider=provider.name, url=text)
                current = result.url
                text = unparse_url(current)
                labels = frozenset(keys_from_url(text))

        return current

    def clean_url_str(self, url: str) -> str:
        return unparse_url(self.clean_url(url))

    def clean_text(self, text: str, on_error: Callable[[str, LinkscrubError], None] | None = None) -> str:
        """Replace every http(s) URL found in text with its cleaned form.

        Candidates that do not parse as a URL with a host, such as ``http://...``
        in prose, are left as they are. Cleaning errors propagate unless
        ``on_error`` is given, in which case it is called with the candidate
        and the error and that candidate is kept verbatim.
        """
        pieces: list[str] = []
        position = 0
        for match in URL_IN_TEXT.finditer(text):
            candidate = _trim_candidate(match.group(0))
            try:
                url = parse_url(candidate)
            except InvalidUrl:
                continue
            try:
                cleaned = unparse_url(self.clean_url(url))
            except LinkscrubError as exc:
                if on_error is None:
                    raise
                on_error(candidate, exc)
                cleaned = candidate
            start = match.start()
            pieces.append(text[position:start])
            pieces.append(cleaned)
            position = start + len(candidate)
        pieces.append(text[position:])
        return "".join(pieces)
