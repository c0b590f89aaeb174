"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_stage`` -- one mutation stage with its terms.
- ``format_sync_report`` -- full post-sync summary.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import StageStatus, SyncStage

if TYPE_CHECKING:
    from .models import StageOutcome, SyncReport

_STAGE_LABELS = {
    SyncStage.DELETE: ("Removals", "deleted"),
    SyncStage.ADD: ("Insertions", "inserted"),
}

_STATUS_LABELS = {
    StageStatus.FULL_SUCCESS: "OK",
    StageStatus.PARTIAL_SUCCESS: "PARTIAL",
    StageStatus.NO_OP: "NO-OP",
    StageStatus.FAILED: "FAILED",
}


# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_stage(outcome: StageOutcome) -> str:
    """Format one stage outcome, listing its terms when there are any.

    Args:
        outcome: The stage outcome.

    Returns:
        Multi-line formatted string.
    """
    title, verb = _STAGE_LABELS[outcome.stage]
    status = _STATUS_LABELS[outcome.status]
    lines: list[str] = []

    match outcome.status:
        case StageStatus.NO_OP:
            detail = outcome.reason or "nothing to do"
            if outcome.terms:
                detail += f", {len(outcome.terms)} terms not {verb}"
        case StageStatus.FAILED if outcome.error:
            detail = outcome.error
        case _:
            detail = f"{outcome.acknowledged} of {outcome.requested} {verb}"
            if outcome.parsed is not None:
                detail += f", {outcome.parsed} parsed"

    lines.append(f"{title}: [{status}] {detail}")
    for index, term in enumerate(outcome.terms, start=1):
        lines.append(f"  {index}. {term}")

    return "\n".join(lines)


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report for project {report.project_id} ({report.language})"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"{report.local_count} local keys, {report.remote_count} remote terms: "
        f"{len(report.difference.insertions)} to insert, "
        f"{len(report.difference.removals)} to remove"
    )
    lines.append("")

    for outcome in report.outcomes:
        lines.append(format_stage(outcome))
        lines.append("")

    if report.difference.is_empty:
        lines.append("Already in sync. No changes needed.")
    elif report.success:
        lines.append("Sync completed.")
    else:
        lines.append("Sync completed with errors.")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def _outcome_to_json(outcome: StageOutcome) -> dict:
    entry: dict = {
        "status": outcome.status.value,
        "requested": outcome.requested,
        "acknowledged": outcome.acknowledged,
        "terms": list(outcome.terms),
    }
    if outcome.parsed is not None:
        entry["parsed"] = outcome.parsed
    if outcome.reason:
        entry["reason"] = outcome.reason
    if outcome.error:
        entry["error"] = outcome.error
    return entry


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with project info, counts, and per-stage details.
    """
    return {
        "project_id": report.project_id,
        "language": report.language,
        "dry_run": report.dry_run,
        "success": report.success,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "local_count": report.local_count,
        "remote_count": report.remote_count,
        "insertions": list(report.difference.insertions),
        "removals": list(report.difference.removals),
        "stages": {
            outcome.stage.value: _outcome_to_json(outcome)
            for outcome in report.outcomes
        },
    }
