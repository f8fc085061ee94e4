"""Command line entry point.

`jcurl [OPTIONS] URL...` sends the same request to every URL concurrently and
prints each JSON response body on stdout as it arrives. Diagnostics (logs,
summary table) go to stderr.

Exit status: 2 for invalid arguments (nothing is sent), 0 otherwise, or 1
with `--fail` when at least one request failed.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.http_client import build_async_client
from adapters.httpx_executor import HttpxExecutor
from adapters.json_exporter import export_outcomes_json
from adapters.reporter import ConsoleReporter
from cli.logging_setup import configure_logging, resolve_level
from cli.ui_components import build_outcomes_table
from core.config import APP_NAME, APP_VERSION, AppSettings
from core.domain.errors import InvalidUrlError, MalformedHeaderError, RequestConfigError
from core.domain.models import HttpMethod, RequestOutcome, RequestSpec
from core.services.dispatcher import DispatchHooks, dispatch

app = typer.Typer(
    add_completion=False,
    help="Send one request to many URLs concurrently and print each JSON response.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {APP_VERSION}")
        raise typer.Exit()


def _load_settings(**overrides: object) -> AppSettings:
    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_spec(
    urls: list[str],
    method: HttpMethod,
    headers: list[str],
    data: str | None,
) -> RequestSpec:
    try:
        return RequestSpec.create(urls, method=method, headers=headers, body=data)
    except MalformedHeaderError as exc:
        raise typer.BadParameter(str(exc), param_hint="'-H' / '--header'") from exc
    except InvalidUrlError as exc:
        raise typer.BadParameter(str(exc), param_hint="'URL...'") from exc
    except RequestConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


async def _run_batch(
    spec: RequestSpec,
    settings: AppSettings,
    reporter: ConsoleReporter,
) -> list[RequestOutcome]:
    async with build_async_client(settings) as client:
        executor = HttpxExecutor(settings, client=client)
        return await dispatch(
            spec,
            executor,
            max_concurrency=settings.max_concurrency,
            hooks=DispatchHooks(outcome=reporter),
        )


@app.command()
def request(
    urls: list[str] = typer.Argument(
        ...,
        metavar="URL...",
        help="One or more absolute http(s) URLs. Duplicates are requested again.",
    ),
    method: HttpMethod = typer.Option(
        HttpMethod.GET,
        "-X",
        "--request",
        case_sensitive=False,
        help="Request method to use when communicating with the HTTP server.",
    ),
    headers: list[str] | None = typer.Option(
        None,
        "-H",
        "--header",
        help="Extra header 'Name:Value' to include in the request. Repeatable.",
    ),
    data: str | None = typer.Option(
        None,
        "-d",
        "--data",
        help="Request body, sent as-is with any method.",
    ),
    max_concurrency: int | None = typer.Option(
        None,
        "--max-concurrency",
        min=1,
        help="Maximum requests in flight (default: unbounded).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds (default: transport default).",
    ),
    compact: bool = typer.Option(
        False,
        "--compact",
        help="Print one JSON document per line.",
    ),
    output: Path | None = typer.Option(
        None,
        "-o",
        "--output",
        dir_okay=False,
        help="Also write every outcome (status, timing, errors) to this JSON file.",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Print a summary table on stderr when the batch is done.",
    ),
    fail: bool = typer.Option(
        False,
        "--fail",
        help="Exit with status 1 when any request failed.",
    ),
    verbose: int = typer.Option(
        0,
        "-v",
        "--verbose",
        count=True,
        help="More diagnostics on stderr (-v info, -vv debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Send the request to every URL and print each JSON response."""

    settings = _load_settings(
        max_concurrency=max_concurrency,
        http_timeout_seconds=timeout,
        pretty_output=False if compact else None,
    )

    err_console = Console(stderr=True)
    configure_logging(resolve_level(settings.log_level, verbose), err_console)

    # Configuration errors stop here, before any connection is opened.
    spec = _build_spec(urls, method, headers or [], data)

    reporter = ConsoleReporter(Console(soft_wrap=True), pretty=settings.pretty_output)
    outcomes = asyncio.run(_run_batch(spec, settings, reporter))

    if output is not None:
        export_outcomes_json(outcomes=outcomes, output_path=output)
    if summary:
        err_console.print(build_outcomes_table(outcomes))

    if fail and any(not o.ok for o in outcomes):
        raise typer.Exit(code=1)


def run() -> None:
    app(prog_name=APP_NAME)
