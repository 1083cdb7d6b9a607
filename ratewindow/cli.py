"""Click CLI for inspecting endpoint rate limit configs."""

from __future__ import annotations

import json

import click

from ratewindow.config import RateLimitConfigError, load_limits_config
from ratewindow.limiter.matcher import normalize_path, path_matches
from ratewindow.models import LimitRuleConfig


def _rule_summary(pattern: str | None, rule: LimitRuleConfig) -> dict[str, object]:
    return {
        "pattern": pattern,
        "max_requests": rule.max_requests,
        "window_seconds": rule.window_seconds,
        "headers": rule.headers,
    }


@click.group()
def cli() -> None:
    """ratewindow rate limit config tools."""


@cli.command("check-config")
@click.argument("config_path")
def check_config(config_path: str) -> None:
    """Validate a config file and print its rules in match order."""
    try:
        config = load_limits_config(config_path)
    except RateLimitConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    output = {
        "endpoints": [_rule_summary(r.pattern, r) for r in config.endpoints],
        "default": _rule_summary(None, config.default) if config.default else None,
    }
    click.echo(json.dumps(output, indent=2))


@cli.command()
@click.argument("path")
@click.option("--config", "config_path", required=True, help="Rate limit config JSON.")
def match(path: str, config_path: str) -> None:
    """Show which rule governs PATH (first matching pattern wins)."""
    try:
        config = load_limits_config(config_path)
    except RateLimitConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    path = normalize_path(path)
    for rule in config.endpoints:
        if path_matches(path, rule.pattern):
            click.echo(json.dumps(_rule_summary(rule.pattern, rule), indent=2))
            return
    if config.default is not None:
        click.echo(json.dumps(_rule_summary("default", config.default), indent=2))
        return
    click.echo(f"No rate limit applies to {path}", err=True)
    raise SystemExit(1)
