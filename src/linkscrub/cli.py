"""Click CLI with commands: clean, text, providers."""

from __future__ import annotations

import sys

import click

from linkscrub.cleaner import UrlCleaner
from linkscrub.errors import LinkscrubError, RuleLoadError
from linkscrub.logging import setup_logging
from linkscrub.rules import RuleSet, load_rules_file
from linkscrub.settings import Settings


@click.group()
@click.option("--rules", "rules_path", default=None, help="Path to a JSON or YAML rule file (default: LINKSCRUB_RULES_PATH).")
@click.option("--verbose", "-v", is_flag=True, help="Log per-URL decisions to stderr.")
@click.pass_context
def cli(ctx: click.Context, rules_path: str | None, verbose: bool) -> None:
    """Strip tracking parameters from URLs."""
    ctx.ensure_object(dict)
    settings = Settings()
    ctx.obj["settings"] = settings
    ctx.obj["rules_path"] = rules_path or settings.rules_path
    ctx.obj["log"] = setup_logging(settings.log_dir, "linkscrub", verbose=verbose)


def _load_rules(ctx: click.Context) -> RuleSet:
    try:
        return load_rules_file(ctx.obj["rules_path"], log=ctx.obj["log"])
    except RuleLoadError as exc:
        raise click.ClickException(str(exc)) from exc


def _make_cleaner(ctx: click.Context, referral_marketing: bool | None) -> UrlCleaner:
    settings: Settings = ctx.obj["settings"]
    if referral_marketing is None:
        referral_marketing = settings.strip_referral_marketing
    return UrlCleaner(
        _load_rules(ctx),
        strip_referral_marketing=referral_marketing,
        use_domain_keys=settings.use_domain_keys,
        log=ctx.obj["log"],
    )


_referral_option = click.option(
    "--referral-marketing/--no-referral-marketing",
    default=None,
    help="Also strip referral-marketing fields (default: LINKSCRUB_STRIP_REFERRAL_MARKETING).",
)
_keep_going_option = click.option(
    "--keep-going", is_flag=True, help="Echo input unchanged when it cannot be cleaned instead of failing."
)


@cli.command()
@click.argument("urls", nargs=-1)
@_referral_option
@_keep_going_option
@click.pass_context
def clean(ctx: click.Context, urls: tuple[str, ...], referral_marketing: bool | None, keep_going: bool) -> None:
    """Clean URL arguments, or one URL per stdin line when none are given."""
    cleaner = _make_cleaner(ctx, referral_marketing)
    log = ctx.obj["log"]

    inputs = list(urls) or [line.strip() for line in sys.stdin if line.strip()]
    for url in inputs:
        try:
            click.echo(cleaner.clean_url_str(url))
        except LinkscrubError as exc:
            log.warning("clean.failed", url=url, error=str(exc))
            if not keep_going:
                raise click.ClickException(str(exc)) from exc
            click.echo(url)


@cli.command()
@_referral_option
@_keep_going_option
@click.pass_context
def text(ctx: click.Context, referral_marketing: bool | None, keep_going: bool) -> None:
    """Copy stdin to stdout with every URL in it cleaned."""
    cleaner = _make_cleaner(ctx, referral_marketing)
    log = ctx.obj["log"]

    def keep_failed(url: str, exc: LinkscrubError) -> None:
        log.warning("text.url_failed", url=url, error=str(exc))

    try:
        result = cleaner.clean_text(sys.stdin.read(), on_error=keep_failed if keep_going else None)
    except LinkscrubError as exc:
        log.warning("text.failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc
    click.echo(result, nl=False)


@cli.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List providers in rule order with their domain keys."""
    rule_set = _load_rules(ctx)
    for provider in rule_set.providers():
        click.echo(f"{provider.name}\t{provider.domain_key() or '-'}")
    click.echo(f"\n{len(rule_set)} providers")
