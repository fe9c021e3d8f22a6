"""
Ranker Router
Method-size ranking for JVM archives.

Runs the classfile_ranker package over a JAR found under the configured
archives root and returns the ranked methods with run statistics.
"""
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.config import settings
from classfile_ranker import PACKAGE_NAME, RANKER_VERSION, SCHEMA_VERSION  # type: ignore
from classfile_ranker.io.schema import AggregatedMethodEntry, EntryFailure, RunStats  # type: ignore
from classfile_ranker.policy.profile import Profile  # type: ignore
from classfile_ranker.runner import run_ranker  # type: ignore

logger = logging.getLogger(__name__)


# =============================================================================
# Request/Response Models
# =============================================================================

class RankerRunRequest(BaseModel):
    """Request to rank the methods of one archive."""
    archive_path: str = Field(
        ...,
        description="JAR path, absolute or relative to ARCHIVES_ROOT",
        min_length=1,
    )
    top_n: Optional[int] = Field(
        None,
        ge=0,
        description="Return only the N largest methods (default: DEFAULT_TOP_N)",
    )
    write_outputs: bool = Field(
        False,
        description="Write ranking_report.json under RESULTS_PATH",
    )


class RankerRunResponse(BaseModel):
    """Response from a ranking run."""
    package_name: str = PACKAGE_NAME
    ranker_version: str = RANKER_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str
    archive_path: str
    verdict: str
    reasons: List[str] = Field(default_factory=list)
    stats: RunStats
    methods: List[AggregatedMethodEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    failures: List[EntryFailure] = Field(default_factory=list)
    output_dir: Optional[str] = None


# =============================================================================
# Router
# =============================================================================

router = APIRouter()


def _resolve_archive(archive_path: str) -> Path:
    p = Path(archive_path)
    if not p.is_absolute():
        p = settings.archives_root / p
    return p


@router.post(
    "/run",
    response_model=RankerRunResponse,
    status_code=status.HTTP_200_OK,
    summary="Rank the methods of one JAR by bytecode size",
)
async def run_ranker_endpoint(request: RankerRunRequest):
    """
    Decode every ``.class`` entry of the archive and return its methods
    ordered by Code-attribute length, largest first.

    Entries that fail to decode are listed in ``warnings`` / ``failures``;
    an archive that is not a ZIP container is rejected with 422.
    """
    profile = Profile.v0()
    archive = _resolve_archive(request.archive_path)

    if not archive.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Archive not found: {archive}",
        )

    out_dir = None
    if request.write_outputs:
        out_dir = settings.results_path / archive.stem

    limit = request.top_n if request.top_n is not None else settings.DEFAULT_TOP_N
    report = run_ranker(
        archive_path=str(archive),
        profile=profile,
        output_dir=out_dir,
        limit=limit,
    )

    if report.verdict == "REJECT":
        logger.warning("Ranker rejected %s: %s", archive, report.reasons)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"reasons": report.reasons, "warnings": report.warnings},
        )

    return RankerRunResponse(
        profile_id=report.profile_id,
        archive_path=str(archive),
        verdict=report.verdict,
        reasons=report.reasons,
        stats=report.stats,
        methods=report.methods,
        warnings=report.warnings,
        failures=report.failures,
        output_dir=str(out_dir) if out_dir else None,
    )
