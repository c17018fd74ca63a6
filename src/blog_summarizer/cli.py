"""Command-line entry points for the blog summarizer."""

import asyncio
import dataclasses
import json
from datetime import date, datetime
from functools import partial
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich import print as rprint
from rich.markup import escape

from .config import configure_logging, get_settings
from .dictionary import get_dictionary
from .errors import PipelineError
from .extractor import extract
from .fetcher import build_http_client, fetch
from .storage import Stores, open_stores, persist
from .summarizer import summarize
from .translator import translate
from .workflow import BatchRunResult, PipelineResult, process_blog, process_many

app = typer.Typer(
    help="Summarize blog posts and translate the summary word-by-word."
)


def _to_plain(value: Any) -> Any:
    """
    Convert dataclasses, Paths, and date-like objects into JSON-serializable primitives.
    Sets are returned as lists to avoid JSON serialization errors.
    """
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value):
        return _to_plain(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_plain(item) for item in value]
    return value


def _write_output(out_path: Path, json_payload: dict) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(json_payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def _batch_output_path(outdir: Path, url: str, index: int) -> Path:
    slug = url.rstrip("/").rsplit("/", 1)[-1] or "index"
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "-" for ch in slug)[:60]
    return outdir / f"{index:03d}-{safe}.json"


def _print_result(result: PipelineResult) -> None:
    rprint(f"[bold]{escape(result.title)}[/bold]")
    rprint(f"[dim]{escape(result.url)} via {escape(result.strategy)}[/dim]")
    rprint(f"[cyan]Summary:[/cyan] {escape(result.summary)}")
    rprint(f"[cyan]Translated:[/cyan] {escape(result.summary_translated)}")
    if result.summary_id is not None:
        archived = "archived" if result.archived else "not archived"
        rprint(f"[green]Stored as summary {result.summary_id} ({archived})[/green]")


def _stages(client, stores: Stores) -> dict:
    persist_fn = None
    if stores.enabled:
        persist_fn = partial(
            persist, summary_store=stores.summary_store, archive=stores.archive
        )
    return {"fetch_fn": partial(fetch, client=client), "persist_fn": persist_fn}


async def _run_process(url: str, *, persist_enabled: bool) -> PipelineResult:
    settings = get_settings()
    stores = await open_stores(settings) if persist_enabled else Stores()
    try:
        async with build_http_client(settings.fetch_timeout_seconds) as client:
            return await process_blog(url, **_stages(client, stores))
    finally:
        await stores.aclose()


async def _run_batch(
    urls: List[str], *, persist_enabled: bool, concurrency: int
) -> BatchRunResult:
    settings = get_settings()
    stores = await open_stores(settings) if persist_enabled else Stores()
    try:
        async with build_http_client(settings.fetch_timeout_seconds) as client:
            return await process_many(
                urls, concurrency=concurrency, **_stages(client, stores)
            )
    finally:
        await stores.aclose()


@app.command("process")
def process_command(
    url: str = typer.Argument(..., help="Blog post URL (http or https)."),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to write the full result as JSON.",
    ),
    no_persist: bool = typer.Option(
        False,
        "--no-persist",
        help="Skip writing to Postgres and MongoDB even when configured.",
    ),
):
    """Run one URL through fetch -> extract -> summarize -> translate -> persist."""
    try:
        result = asyncio.run(_run_process(url, persist_enabled=not no_persist))
    except PipelineError as exc:
        rprint(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1)

    _print_result(result)
    if out:
        _write_output(out, _to_plain(result))
        rprint(f"[cyan]Wrote output to {escape(str(out))}[/cyan]")


@app.command("extract")
def extract_command(
    html_file: Path = typer.Argument(..., help="Saved HTML page to extract offline."),
    url: str = typer.Option(
        "about:blank",
        "--url",
        help="Source URL recorded with the extraction.",
    ),
):
    """Extract, summarize, and translate a saved page without network or storage."""
    if not html_file.exists():
        raise typer.BadParameter(f"{html_file} does not exist.")
    html = html_file.read_text(encoding="utf-8", errors="replace")
    try:
        extraction = extract(html, url)
    except PipelineError as exc:
        rprint(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1)

    summary = summarize(extraction.content)
    result = PipelineResult(
        title=extraction.title,
        summary=summary,
        summary_translated=translate(summary, get_dictionary()),
        full_text=extraction.content,
        url=url,
        strategy=extraction.strategy,
    )
    _print_result(result)
    rprint(f"[dim]{len(extraction.content)} characters of content[/dim]")


@app.command("batch")
def batch_command(
    urls: List[str] = typer.Argument(..., help="One or more blog post URLs."),
    outdir: Optional[Path] = typer.Option(
        None,
        "--outdir",
        "-o",
        help="Optional directory to write one JSON result per URL.",
    ),
    concurrency: int = typer.Option(
        4,
        "--concurrency",
        "-c",
        help="Number of URLs to process in parallel.",
    ),
    no_persist: bool = typer.Option(
        False,
        "--no-persist",
        help="Skip writing to Postgres and MongoDB even when configured.",
    ),
):
    """
    Process several URLs concurrently.
    """
    if concurrency < 1:
        raise typer.BadParameter("concurrency must be >= 1.")
    if outdir:
        outdir.mkdir(parents=True, exist_ok=True)

    batch = asyncio.run(
        _run_batch(urls, persist_enabled=not no_persist, concurrency=concurrency)
    )

    for item in batch.items:
        if item.error:
            rprint(f"[red]Failed {escape(item.url)}: {escape(item.error)}[/red]")
            continue
        if outdir:
            out_path = _batch_output_path(outdir, item.url, item.index)
            _write_output(out_path, _to_plain(item.result))
            rprint(f"[cyan]Wrote output to {escape(str(out_path))}[/cyan]")
        else:
            rprint(f"[cyan]--- {escape(item.url)} ---[/cyan]")
            _print_result(item.result)

    rprint(
        f"[cyan]Batch complete: {len(batch.successes)} succeeded, "
        f"{len(batch.failures)} failed.[/cyan]"
    )
    if batch.failures:
        raise typer.Exit(code=1)


def main():
    configure_logging()
    app()


if __name__ == "__main__":
    main()
