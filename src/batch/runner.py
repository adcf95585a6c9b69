# src/batch/runner.py — v1
"""Batch runner — apply one operation to every source file under a set of roots.

Workflow:
    1. Per root, concurrently: load the merged config, discover files
    2. Flatten into WorkItems sharing their root's config
    3. Run the operation on every WorkItem in worker threads, at most
       ``settings.worker_limit`` at a time
    4. Capture per-file exceptions as RunErrors; siblings keep running
    5. Tally outcomes and return a RunReport

The runner never prints and never decides exit status.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from cljfmt.batch.models import FileMessage, Outcome, RunError, RunReport, WorkItem
from cljfmt.batch.scanner import discover_files
from cljfmt.config.loader import load_config
from cljfmt.logging.context import set_path_context

if TYPE_CHECKING:
    from cljfmt.batch.operations import Operation
    from cljfmt.config.settings import RunSettings

logger = logging.getLogger(__name__)


class BatchRunner:
    """Run an operation over all files under a set of roots."""

    def __init__(self, settings: RunSettings, cwd: Path | None = None) -> None:
        self._settings = settings
        self._cwd = cwd

    def expand_root(self, root: Path) -> list[WorkItem]:
        """Load the root's config once and pair it with every file found."""
        config = load_config(root, depth=self._settings.config_search_depth)
        return [
            WorkItem(config=config, path=path, file=file)
            for path, file in discover_files(root, config, cwd=self._cwd)
        ]

    async def collect(self, roots: Sequence[Path]) -> list[WorkItem]:
        """Expand all roots in parallel. Config errors propagate."""
        groups = await asyncio.gather(
            *(asyncio.to_thread(self.expand_root, root) for root in roots)
        )
        return [item for group in groups for item in group]

    async def run(
        self, roots: Sequence[Path], operation: Operation,
    ) -> RunReport:
        """Process every file under ``roots`` and summarize the results."""
        t0 = time.perf_counter()

        items = await self.collect(roots)
        semaphore = asyncio.Semaphore(self._settings.worker_limit)
        results = await asyncio.gather(
            *(self._run_item(item, operation, semaphore) for item in items)
        )

        counts: Counter[str] = Counter()
        errors: list[RunError] = []
        messages: list[FileMessage] = []
        for item, result in zip(items, results):
            if isinstance(result, RunError):
                errors.append(result)
                continue
            counts[result.kind] += 1
            if result.info:
                messages.append(
                    FileMessage(path=item.path, kind=result.kind, info=result.info)
                )

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        return RunReport(
            counts=dict(counts),
            errors=sorted(errors, key=lambda e: e.path),
            messages=sorted(messages, key=lambda m: m.path),
            elapsed_ms=elapsed_ms,
            total=len(items),
        )

    async def _run_item(
        self,
        item: WorkItem,
        operation: Operation,
        semaphore: asyncio.Semaphore,
    ) -> Outcome | RunError:
        async with semaphore:
            set_path_context(item.path)
            try:
                outcome = await asyncio.to_thread(
                    operation, item.config, item.path, item.file,
                )
            except Exception as exc:
                logger.debug("Failed to process %s", item.path, exc_info=True)
                return RunError.from_exception(item.path, exc)

        if outcome.debug_message:
            logger.debug(outcome.debug_message)
        return outcome


def run_batch(
    roots: Sequence[Path],
    operation: Operation,
    settings: RunSettings,
    cwd: Path | None = None,
) -> RunReport:
    """Synchronous entry point for BatchRunner.run()."""
    return asyncio.run(BatchRunner(settings, cwd=cwd).run(roots, operation))
