"""Blog processing pipeline.

A single coroutine runs the stages in order:
- fetch (one time-bounded GET)
- extract (title + article body, in a worker thread)
- summarize (first / longest / last sentence)
- translate (dictionary substitution)
- persist (Postgres summary, then best-effort Mongo archive)

Every stage is injectable so tests and the CLI can swap in fakes or skip
persistence. Cancelling the task running ``process_blog`` cancels whichever
stage is awaiting at that moment.
"""

from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence

from loguru import logger

from .dictionary import get_dictionary
from .errors import PipelineError
from .extractor import ExtractionResult, extract
from .fetcher import RawPage, fetch
from .storage import PersistedSummary, SummaryRecord
from .summarizer import is_degenerate, summarize
from .translator import translate


# --- Data containers -------------------------------------------------------

@dataclass
class PipelineResult:
    title: str
    summary: str
    summary_translated: str
    full_text: str
    url: str
    strategy: str
    summary_id: int | None = None
    archived: bool = False

    def to_response(self) -> dict[str, str]:
        """Public payload returned to the web form."""
        return {
            "title": self.title,
            "summary": self.summary,
            "summaryTranslated": self.summary_translated,
            "fullText": self.full_text,
            "url": self.url,
        }


@dataclass
class BatchItemResult:
    index: int
    url: str
    result: PipelineResult | None
    error: str | None


@dataclass
class BatchRunResult:
    items: list[BatchItemResult]

    @property
    def successes(self) -> list[BatchItemResult]:
        return [item for item in self.items if item.error is None]

    @property
    def failures(self) -> list[BatchItemResult]:
        return [item for item in self.items if item.error is not None]


# --- Coordinator ----------------------------------------------------------

FetchFn = Callable[[str], Awaitable[RawPage]]
ExtractFn = Callable[[str, str], ExtractionResult]
SummarizeFn = Callable[[str], str]
TranslateFn = Callable[[str, Mapping[str, str]], str]
PersistFn = Callable[[SummaryRecord, str], Awaitable[PersistedSummary]]


async def process_blog(
    url: str,
    *,
    fetch_fn: FetchFn | None = None,
    extract_fn: ExtractFn | None = None,
    summarize_fn: SummarizeFn | None = None,
    translate_fn: TranslateFn | None = None,
    persist_fn: PersistFn | None = None,
    dictionary: Optional[Mapping[str, str]] = None,
) -> PipelineResult:
    """
    Run the full pipeline for one blog URL.

    Raises PipelineError subclasses for fetch, extraction, and summary-store
    failures. Persistence is skipped when ``persist_fn`` is None.
    """
    fetch_fn = fetch_fn or fetch
    extract_fn = extract_fn or extract
    summarize_fn = summarize_fn or summarize
    translate_fn = translate_fn or translate
    dictionary = dictionary if dictionary is not None else get_dictionary()

    page = await fetch_fn(url)
    extraction = await asyncio.to_thread(extract_fn, page.html, page.url)

    summary = summarize_fn(extraction.content)
    if is_degenerate(summary):
        logger.warning(f"Summary for {page.url} has no sentence longer than 20 characters")
    summary_translated = translate_fn(summary, dictionary)

    result = PipelineResult(
        title=extraction.title,
        summary=summary,
        summary_translated=summary_translated,
        full_text=extraction.content,
        url=page.url,
        strategy=extraction.strategy,
    )

    if persist_fn is None:
        logger.debug(f"Persistence disabled; not storing {page.url}")
        return result

    record = SummaryRecord(
        blog_url=page.url,
        title=extraction.title,
        summary=summary,
        summary_translated=summary_translated,
    )
    persisted = await persist_fn(record, extraction.content)
    return dataclasses.replace(
        result, summary_id=persisted.summary_id, archived=persisted.archived
    )


async def process_many(
    urls: Sequence[str],
    *,
    concurrency: int = 4,
    **stages,
) -> BatchRunResult:
    """
    Process independent URLs concurrently, at most ``concurrency`` at a time.

    Failures are captured per item; results keep input order.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1.")
    gate = asyncio.Semaphore(concurrency)

    async def _run(index: int, url: str) -> BatchItemResult:
        async with gate:
            try:
                result = await process_blog(url, **stages)
            except PipelineError as exc:
                logger.warning(f"Failed {url}: {exc.kind}")
                return BatchItemResult(index=index, url=url, result=None, error=exc.message)
            except Exception as exc:
                logger.exception(f"Unexpected failure processing {url}")
                return BatchItemResult(index=index, url=url, result=None, error=str(exc))
            return BatchItemResult(index=index, url=url, result=result, error=None)

    items: List[BatchItemResult] = await asyncio.gather(
        *(_run(idx, url) for idx, url in enumerate(urls))
    )
    return BatchRunResult(items=list(items))
