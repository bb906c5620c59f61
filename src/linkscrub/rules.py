"""Rule model: providers compiled from a ClearURLs-style rule source."""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any
from urllib.parse import SplitResult

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from linkscrub.errors import RuleLoadError
from linkscrub.keys import domain_key_from_pattern
from linkscrub.redirection import find_redirection
from linkscrub.stripper import Cleaned, remove_fields
from linkscrub.urls import parse_url

JAVASCRIPT_VOID = "javascript:void(0)"

PATTERN_FIELDS = ("rules", "raw_rules", "referral_marketing", "exceptions", "redirections")


class ProviderSpec(BaseModel):
    """Shape of one provider object in a rule source."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    url_pattern: str
    rules: list[str] = []
    raw_rules: list[str] = []
    referral_marketing: list[str] = []
    exceptions: list[str] = []
    redirections: list[str] = []


@dataclass(frozen=True)
class Provider:
    name: str
    url_pattern: re.Pattern[str]
    rules: tuple[re.Pattern[str], ...] = ()
    raw_rules: tuple[re.Pattern[str], ...] = ()
    referral_marketing: tuple[re.Pattern[str], ...] = ()
    exceptions: tuple[re.Pattern[str], ...] = ()
    redirections: tuple[re.Pattern[str], ...] = ()

    @cached_property
    def _domain_key(self) -> str | None:
        return domain_key_from_pattern(self.url_pattern.pattern)

    def domain_key(self) -> str | None:
        """Literal host label every URL this provider matches must contain, if one can be derived."""
        return self._domain_key

    def match_url(self, url: str) -> bool:
        if url == JAVASCRIPT_VOID:
            return False
        if self.url_pattern.search(url) is None:
            return False
        return not any(pattern.search(url) for pattern in self.exceptions)

    def get_redirection(self, url: str) -> str | None:
        return find_redirection(self.redirections, url)

    def field_patterns(self, strip_referral_marketing: bool) -> tuple[re.Pattern[str], ...]:
        if strip_referral_marketing:
            return self.rules + self.referral_marketing
        return self.rules

    def clean(self, url: SplitResult, strip_referral_marketing: bool = False) -> Cleaned:
        return remove_fields(
            url,
            redirections=self.redirections,
            raw_rules=self.raw_rules,
            field_patterns=self.field_patterns(strip_referral_marketing),
        )

    def remove_fields_from_url(self, url: SplitResult | str, strip_referral_marketing: bool = False) -> SplitResult:
        """Clean url with this provider alone.

        A matching redirection returns the decoded target untouched by any
        other rule; otherwise raw rules run first, then matching query and
        fragment keys are dropped.
        """
        if isinstance(url, str):
            url = parse_url(url)
        return self.clean(url, strip_referral_marketing).url


@dataclass(frozen=True)
class RuleSet:
    """Ordered, immutable collection of providers."""

    _providers: tuple[Provider, ...] = ()

    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


def _compile(provider: str, field: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RuleLoadError(provider, to_camel(field), pattern, str(exc)) from exc


def build_provider(name: str, data: Any) -> Provider:
    try:
        parsed = ProviderSpec.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        raise RuleLoadError(name, field, None, error["msg"]) from exc

    compiled = {
        field: tuple(_compile(name, field, pattern) for pattern in getattr(parsed, field))
        for field in PATTERN_FIELDS
    }
    return Provider(name=name, url_pattern=_compile(name, "url_pattern", parsed.url_pattern), **compiled)


def _unwrap(source: Mapping[str, Any]) -> Mapping[str, Any]:
    """Accept the published layout, where providers sit under a single "providers" key."""
    inner = source.get("providers")
    if len(source) == 1 and isinstance(inner, Mapping) and "urlPattern" not in inner:
        return inner
    return source


def load(rule_source: Mapping[str, Any]) -> RuleSet:
    """Compile a mapping of provider name to provider object into a RuleSet."""
    if not isinstance(rule_source, Mapping):
        raise RuleLoadError(None, None, None, f"rule source must be a mapping, got {type(rule_source).__name__}")
    providers = tuple(build_provider(str(name), data) for name, data in _unwrap(rule_source).items())
    return RuleSet(providers)


def load_rules_file(path: str | Path, log: structlog.stdlib.BoundLogger | None = None) -> RuleSet:
    """Load a JSON or YAML rule file."""
    log = log or structlog.get_logger("linkscrub")
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuleLoadError(None, None, None, f"cannot read {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise RuleLoadError(None, None, None, f"cannot parse {path}: {exc}") from exc

    rule_set = load(data)
    log.info("rules.loaded", path=str(path), providers=len(rule_set))
    return rule_set
