"""
Ranker runner — top-level orchestration: archive → ranking report.

This module ties archive enumeration, class decoding, aggregation and IO
together into ``analyze_archive`` (in-memory, raises on an invalid
container) and ``run_ranker`` (file on disk, always returns a report),
callable from the API endpoint, from a CLI, or programmatically.
"""
from __future__ import annotations

import argparse
import hashlib
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from classfile_ranker.core.aggregation import (
    ProgressCallback,
    aggregate_entries,
    top_n,
)
from classfile_ranker.core.errors import InvalidContainerError
from classfile_ranker.io.archive import JarArchive
from classfile_ranker.io.schema import RankingReport
from classfile_ranker.io.writer import write_outputs
from classfile_ranker.policy.profile import Profile
from classfile_ranker.policy.verdict import ArchiveRejectReason, Verdict

logger = logging.getLogger(__name__)


def analyze_archive(
    archive_bytes: bytes,
    on_progress: Optional[ProgressCallback] = None,
    profile: Optional[Profile] = None,
) -> RankingReport:
    """
    Rank every method of every class file inside *archive_bytes*.

    Raises
    ------
    InvalidContainerError
        If *archive_bytes* is not a ZIP container.  Raised before any
        progress notification.
    """
    if profile is None:
        profile = Profile.v0()
    started = time.perf_counter()

    with JarArchive(archive_bytes) as archive:
        class_entries = [
            e for e in archive.iter_entries()
            if profile.matches(e.path, e.is_directory)
        ]
        logger.debug("%d class entries selected", len(class_entries))
        return aggregate_entries(
            class_entries,
            on_progress=on_progress,
            profile=profile,
            started=started,
        )


def run_ranker(
    archive_path: str,
    profile: Profile | None = None,
    output_dir: Path | None = None,
    limit: int | None = None,
) -> RankingReport:
    """
    Run the ranker on a single archive file.

    Parameters
    ----------
    archive_path : str
        Path to the JAR (or any ZIP holding class files).
    profile : Profile, optional
        Support profile.  Defaults to Profile.v0().
    output_dir : Path, optional
        Directory to write JSON outputs.  If None, outputs are not
        written to disk (useful for API responses).
    limit : int, optional
        Keep only the top *limit* methods in the report.

    Returns
    -------
    RankingReport
        verdict REJECT with INVALID_CONTAINER if the file is not an archive.

    Raises
    ------
    FileNotFoundError
        If *archive_path* does not exist.
    """
    if profile is None:
        profile = Profile.v0()

    p = Path(archive_path)
    if not p.exists():
        raise FileNotFoundError(f"Archive not found: {archive_path}")

    archive_bytes = p.read_bytes()
    archive_sha256 = hashlib.sha256(archive_bytes).hexdigest()

    try:
        report = analyze_archive(archive_bytes, profile=profile)
    except InvalidContainerError as e:
        logger.error("Cannot open %s: %s", archive_path, e)
        report = RankingReport(
            profile_id=profile.profile_id,
            verdict=Verdict.REJECT.value,
            reasons=[ArchiveRejectReason.INVALID_CONTAINER.value],
            warnings=[str(e)],
        )

    update = {"archive_path": str(p), "archive_sha256": archive_sha256}
    if limit is not None:
        update["methods"] = top_n(report.methods, limit)
    report = report.model_copy(update=update)

    if output_dir:
        write_outputs(report, output_dir)

    return report


# ── CLI ──────────────────────────────────────────────────────────────────────

def main():
    """CLI entry point for classfile_ranker."""
    parser = argparse.ArgumentParser(
        description="classfile_ranker — rank JVM methods by bytecode size",
    )
    parser.add_argument(
        "archive",
        help="Path to a .jar file",
    )
    parser.add_argument(
        "-n", "--top",
        type=int,
        default=None,
        help="Number of methods to print (default: profile default)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Directory to write JSON outputs",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not Path(args.archive).exists():
        logger.error("File not found: %s", args.archive)
        sys.exit(1)

    profile = Profile.v0()
    report = run_ranker(args.archive, profile=profile, output_dir=args.output_dir)
    if report.verdict == Verdict.REJECT.value:
        for w in report.warnings:
            logger.error("%s", w)
        sys.exit(2)

    n = args.top if args.top is not None else profile.default_top_n

    # Print summary
    print(f"Classes scanned: {report.stats.entries_scanned}")
    print(f"Methods found: {report.stats.methods_found}")
    print(f"Parse time: {report.stats.elapsed_ms:.1f} ms")
    for w in report.warnings:
        print(f"warning: {w}")

    for rank, m in enumerate(top_n(report.methods, n), start=1):
        print(f"{rank:>4}  {m.bytecode_size:>7}  {m.class_name}.{m.method_name}{m.descriptor}")

    if args.output_dir:
        print(f"Outputs written to: {args.output_dir}")


if __name__ == "__main__":
    main()
