"""
Writer — serialize ranker outputs to JSON files.

Filesystem layout per run:
    <output_dir>/ranking_report.json
"""
import json
from pathlib import Path

from classfile_ranker.io.schema import RankingReport

REPORT_FILENAME = "ranking_report.json"


def write_outputs(report: RankingReport, output_dir: Path) -> Path:
    """
    Write ranking_report.json into *output_dir*.

    Creates *output_dir* if it does not exist.
    Returns the path of the written report.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / REPORT_FILENAME
    report_path.write_text(
        json.dumps(
            report.model_dump(mode="json"),
            indent=2,
            sort_keys=True,
        )
        + "\n"
    )

    return report_path
