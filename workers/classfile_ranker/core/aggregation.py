"""
Aggregation — merge per-class decode results into one archive ranking.

Pure computation over already-enumerated entries; the only IO is each
entry's own ``read()``.  One entry's failure becomes a warning and never
aborts the run.
"""
from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Callable, List, Optional, Protocol, Sequence

from classfile_ranker.core.class_decoder import decode_class
from classfile_ranker.core.errors import DecodeError
from classfile_ranker.io.schema import (
    AggregatedMethodEntry,
    EntryFailure,
    RankingReport,
    RunStats,
)
from classfile_ranker.policy.profile import Profile
from classfile_ranker.policy.verdict import judge_archive

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

NO_CLASS_FILES_WARNING = "No .class files found in archive"


class EntrySource(Protocol):
    """Anything with a path and on-demand bytes (see io.archive.ArchiveEntry)."""

    path: str

    def read(self) -> bytes: ...


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def aggregate_entries(
    entries: Sequence[EntrySource],
    on_progress: Optional[ProgressCallback] = None,
    profile: Optional[Profile] = None,
    started: Optional[float] = None,
) -> RankingReport:
    """
    Decode every entry in order and rank all methods by bytecode size.

    *entries* must already be filtered to class files.  *on_progress* is
    called synchronously once per entry with (processed, total).  *started*
    is a ``time.perf_counter()`` reading taken when the whole run began;
    defaults to now.
    """
    if profile is None:
        profile = Profile.v0()
    if started is None:
        started = time.perf_counter()

    total = len(entries)
    if total == 0:
        verdict, reasons = judge_archive(0, 0)
        return RankingReport(
            profile_id=profile.profile_id,
            verdict=verdict.value,
            reasons=reasons,
            stats=RunStats(elapsed_ms=_elapsed_ms(started)),
            warnings=[NO_CLASS_FILES_WARNING],
        )

    methods: List[AggregatedMethodEntry] = []
    warnings: List[str] = []
    failures: List[EntryFailure] = []
    versions: Counter = Counter()

    for processed, entry in enumerate(entries, start=1):
        try:
            result = decode_class(entry.read(), profile.code_attribute_name)
        except DecodeError as e:
            logger.warning("Failed to parse %s: %s", entry.path, e.message)
            warnings.append(f"Failed to parse {entry.path}: {e.message}")
            failures.append(
                EntryFailure(
                    path=entry.path,
                    kind=e.kind.value,
                    state=e.state,
                    message=e.message,
                )
            )
        else:
            class_name = result.display_name
            versions[result.major_version] += 1
            for m in result.methods:
                methods.append(
                    AggregatedMethodEntry(
                        class_name=class_name,
                        method_name=m.name,
                        descriptor=m.descriptor,
                        bytecode_size=m.bytecode_size,
                    )
                )
            logger.debug(
                "%s: %d methods (major=%d)",
                entry.path, len(result.methods), result.major_version,
            )

        if on_progress is not None:
            on_progress(processed, total)

    # Stable: equal sizes keep archive encounter order.
    methods.sort(key=lambda m: m.bytecode_size, reverse=True)

    verdict, reasons = judge_archive(total, len(failures))
    stats = RunStats(
        entries_scanned=total,
        methods_found=len(methods),
        elapsed_ms=_elapsed_ms(started),
    )
    logger.info(
        "Ranked %d methods from %d class files (%d failed) in %.1f ms",
        stats.methods_found, total, len(failures), stats.elapsed_ms,
    )

    return RankingReport(
        profile_id=profile.profile_id,
        verdict=verdict.value,
        reasons=reasons,
        methods=methods,
        stats=stats,
        warnings=warnings,
        failures=failures,
        class_versions=dict(sorted(versions.items())),
    )


def top_n(methods: Sequence[AggregatedMethodEntry], n: int) -> List[AggregatedMethodEntry]:
    """First *n* methods of an already-ranked list; no re-sorting."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return list(methods[:n])
