"""Shared rule fixtures."""

from __future__ import annotations

import json

import pytest

from linkscrub.cleaner import UrlCleaner
from linkscrub.rules import RuleSet, load

RULE_SOURCE = {
    "providers": {
        "example": {
            "urlPattern": r"^https?://(?:[a-z0-9-]+\.)*?example\.com/",
            "rules": ["utm_.*", "^id$"],
            "referralMarketing": ["ref"],
            "exceptions": [r"^https?://example\.com/keep/"],
            "completeProvider": False,
        },
        "amazon": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?amazon(?:\.[a-z]{2,}){1,}",
            "rules": ["pf_rd_[a-z]*", "qid", "sr"],
            "rawRules": [r"\/ref=[^/?]*"],
            "referralMarketing": ["tag"],
        },
        "outbound": {
            "urlPattern": r"^https?://out\.example\.net/",
            "redirections": [r"^https?://out\.example\.net/go\?u=([^&]+)"],
            "rules": ["u"],
        },
        "globalRules": {
            "urlPattern": ".*",
            "rules": ["fbclid", "gclid"],
        },
    }
}


@pytest.fixture
def rule_source() -> dict:
    return json.loads(json.dumps(RULE_SOURCE))


@pytest.fixture
def rule_set(rule_source) -> RuleSet:
    return load(rule_source)


@pytest.fixture
def cleaner(rule_set) -> UrlCleaner:
    return UrlCleaner(rule_set)


@pytest.fixture
def rules_file(tmp_path, rule_source):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(rule_source), encoding="utf-8")
    return path
