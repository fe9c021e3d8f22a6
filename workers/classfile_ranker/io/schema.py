"""
Schema — Pydantic models for ranker JSON outputs.

One output per archive:
  ranking_report.json — ranked methods, run stats, warnings, verdict.

Runtime contract fields (present in every output):
  package_name, ranker_version, profile_id, schema_version.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from classfile_ranker import PACKAGE_NAME, RANKER_VERSION, SCHEMA_VERSION


# ── Ranked method ────────────────────────────────────────────────────────────

class AggregatedMethodEntry(BaseModel):
    """One method in the archive-wide ranking."""

    class_name: str          # display form: "com.example.Foo$Bar"
    method_name: str
    descriptor: str          # e.g. "(ILjava/lang/String;)V"
    bytecode_size: int = Field(0, ge=0)


# ── Run bookkeeping ──────────────────────────────────────────────────────────

class RunStats(BaseModel):
    entries_scanned: int = 0
    methods_found: int = 0
    elapsed_ms: float = 0.0


class EntryFailure(BaseModel):
    """Structured twin of one warning string."""

    path: str
    kind: str                # DecodeErrorKind value
    state: Optional[str] = None
    message: str


# ── Archive-level report ─────────────────────────────────────────────────────

class RankingReport(BaseModel):
    """Archive-level result — ranking_report.json."""

    package_name: str = PACKAGE_NAME
    ranker_version: str = RANKER_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str

    archive_path: Optional[str] = None
    archive_sha256: Optional[str] = None

    verdict: str = "ACCEPT"  # ACCEPT | WARN | REJECT
    reasons: List[str] = Field(default_factory=list)

    methods: List[AggregatedMethodEntry] = Field(default_factory=list)
    stats: RunStats = Field(default_factory=RunStats)
    warnings: List[str] = Field(default_factory=list)
    failures: List[EntryFailure] = Field(default_factory=list)

    # major version → number of classes compiled for it
    class_versions: Dict[int, int] = Field(default_factory=dict)

    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
