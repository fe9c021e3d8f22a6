"""
Verdict — archive-level ACCEPT / WARN / REJECT with reason enums.

Decode failures never change the ranking itself; the verdict only tells a
consumer how much of the archive the ranking covers.
"""
from enum import Enum, unique
from typing import List, Tuple


@unique
class Verdict(str, Enum):
    ACCEPT = "ACCEPT"
    WARN = "WARN"
    REJECT = "REJECT"


@unique
class ArchiveRejectReason(str, Enum):
    INVALID_CONTAINER = "INVALID_CONTAINER"


@unique
class ArchiveWarnReason(str, Enum):
    NO_CLASS_FILES = "NO_CLASS_FILES"
    ENTRIES_FAILED = "ENTRIES_FAILED"


def judge_archive(entries_scanned: int, entries_failed: int) -> Tuple[Verdict, List[str]]:
    """
    Evaluate a finished run.

    Returns (Verdict, list_of_reason_strings).
    """
    warns: List[str] = []

    if entries_scanned == 0:
        warns.append(ArchiveWarnReason.NO_CLASS_FILES.value)

    if entries_failed > 0:
        warns.append(ArchiveWarnReason.ENTRIES_FAILED.value)

    if warns:
        return Verdict.WARN, warns
    return Verdict.ACCEPT, []
