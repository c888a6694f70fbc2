"""CLI entry point for breaking-change-detect."""

import json
import logging

import click

from breaking_change_detect.compare.engine import compare_sources
from breaking_change_detect.compare.extract import extract_endpoints
from breaking_change_detect.compare.models import DifferenceCase
from breaking_change_detect.errors import BreakingChangeError
from breaking_change_detect.fetch import DEFAULT_TIMEOUT, fetch_document


class DocumentError(click.ClickException):
    """A document could not be fetched or parsed."""

    exit_code = 2


def output_options(func):
    """Add the --format and --timeout options shared by every command."""
    func = click.option("--timeout", default=DEFAULT_TIMEOUT, envvar="BCD_TIMEOUT", show_default=True,
                        type=float, help="HTTP timeout in seconds for URL sources.")(func)
    func = click.option("--format", "fmt", default="text", envvar="BCD_FORMAT", show_default=True,
                        type=click.Choice(["text", "json"]), help="Output format.")(func)
    return func


def _format_cases(cases: list[DifferenceCase]) -> str:
    if not cases:
        return "No breaking changes detected."
    width = max(len(c.kind.value) for c in cases)
    lines = [f"{c.kind.value.ljust(width)}  {c.endpoint or '-'}" for c in cases]
    lines.append(f"\n{len(cases)} breaking change(s) detected.")
    return "\n".join(lines)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Find backward-incompatible changes between two OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("old")
@click.argument("new")
@output_options
@click.option("--fail-on-breaking/--no-fail-on-breaking", default=True, show_default=True,
              help="Exit with status 1 when breaking changes are found.")
def compare(old: str, new: str, fmt: str, timeout: float, fail_on_breaking: bool):
    """Compare OLD (baseline) against NEW (candidate); each is a URL or file path."""
    try:
        cases = compare_sources(old, new, timeout=timeout)
    except BreakingChangeError as e:
        raise DocumentError(str(e)) from e

    if fmt == "json":
        click.echo(json.dumps([c.model_dump(mode="json") for c in cases], indent=2))
    else:
        click.echo(_format_cases(cases))

    if cases and fail_on_breaking:
        click.get_current_context().exit(1)


@main.command()
@click.argument("doc")
@output_options
def endpoints(doc: str, fmt: str, timeout: float):
    """List the endpoint index extracted from DOC (URL or file path)."""
    try:
        index = extract_endpoints(fetch_document(doc, timeout=timeout))
    except BreakingChangeError as e:
        raise DocumentError(str(e)) from e

    if fmt == "json":
        click.echo(json.dumps({k: e.model_dump(mode="json") for k, e in index.items()}, indent=2))
        return

    click.echo(f"Found {len(index)} endpoints.")
    for key, endpoint in index.items():
        click.echo(
            f"  {key}: {len(endpoint.request_fields)} request field(s), "
            f"{len(endpoint.response_fields)} response field(s), "
            f"{len(endpoint.parameters)} parameter(s)"
        )
