"""Strip tracking and referral-marketing parameters from URLs with ClearURLs-style rules."""

from linkscrub.cleaner import UrlCleaner
from linkscrub.errors import DecodeError, InvalidUrl, LinkscrubError, RedirectionHasNoCapturingGroup, RuleLoadError
from linkscrub.keys import keys_from_url
from linkscrub.redirection import repeatedly_urldecode
from linkscrub.rules import Provider, RuleSet, load, load_rules_file
from linkscrub.urls import parse_url

__all__ = [
    "DecodeError",
    "InvalidUrl",
    "LinkscrubError",
    "Provider",
    "RedirectionHasNoCapturingGroup",
    "RuleLoadError",
    "RuleSet",
    "UrlCleaner",
    "keys_from_url",
    "load",
    "load_rules_file",
    "parse_url",
    "repeatedly_urldecode",
]
