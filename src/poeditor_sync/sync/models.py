"""Pydantic models for the terms sync engine.

Defines the data contracts shared by the differ, engine and reporter:

- ``TermsDifference``: Terms to add and delete for one run.
- ``SyncStage``: The two mutation stages (delete, add).
- ``StageStatus``: Outcome classification of a stage.
- ``StageOutcome``: What one stage requested and what the API acknowledged.
- ``SyncReport``: Aggregate result of a full run.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class TermsDifference(BaseModel):
    """Terms present only locally (insertions) or only remotely (removals)."""

    insertions: list[str] = []
    removals: list[str] = []

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.insertions and not self.removals


class SyncStage(str, Enum):
    """Mutation stages, in execution order."""

    DELETE = "delete"
    ADD = "add"


class StageStatus(str, Enum):
    """Classification of a mutation stage."""

    FULL_SUCCESS = "full_success"
    PARTIAL_SUCCESS = "partial_success"
    NO_OP = "no_op"
    FAILED = "failed"


def classify_outcome(requested: int, acknowledged: int) -> StageStatus:
    """Classify a batch call by how many terms the API acknowledged.

    Nothing requested is a no-op; everything acknowledged is a full
    success; nothing acknowledged is a failure; anything else (including
    more acknowledgements than requests) is a partial success.
    """
    if requested == 0:
        return StageStatus.NO_OP
    if acknowledged == 0:
        return StageStatus.FAILED
    if acknowledged == requested:
        return StageStatus.FULL_SUCCESS
    return StageStatus.PARTIAL_SUCCESS


class StageOutcome(BaseModel):
    """Result of one mutation stage.

    Attributes:
        stage: Which stage this is.
        status: Outcome classification.
        terms: Terms submitted (or, for a no-op, that would have been).
        requested: Number of terms submitted.
        acknowledged: Number the API reports as added/deleted.
        parsed: Number the API reports as parsed, when a call was made.
        reason: Why a stage was a no-op (``disabled``, ``nothing to do``,
            ``dry run``).
        error: Error message when the call itself failed.
    """

    stage: SyncStage
    status: StageStatus
    terms: list[str] = []
    requested: int = 0
    acknowledged: int = 0
    parsed: int | None = None
    reason: str | None = None
    error: str | None = None

    model_config = {"frozen": True}

    @property
    def succeeded(self) -> bool:
        """True for a full success or a no-op."""
        return self.status in (StageStatus.FULL_SUCCESS, StageStatus.NO_OP)

    @classmethod
    def no_op(
        cls, stage: SyncStage, reason: str, terms: list[str] | None = None
    ) -> StageOutcome:
        return cls(
            stage=stage,
            status=StageStatus.NO_OP,
            terms=terms or [],
            reason=reason,
        )


class SyncReport(BaseModel):
    """Aggregate report for a full sync run.

    Attributes:
        project_id: POEditor project that was synced.
        language: Reference language used to list terms.
        dry_run: Whether mutations were skipped.
        local_count: Number of keys declared locally (duplicates included).
        remote_count: Number of terms listed remotely.
        difference: Computed insertions and removals.
        removals: Outcome of the delete stage.
        insertions: Outcome of the add stage.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    project_id: str
    language: str
    dry_run: bool = False
    local_count: int
    remote_count: int
    difference: TermsDifference
    removals: StageOutcome
    insertions: StageOutcome
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def outcomes(self) -> list[StageOutcome]:
        return [self.removals, self.insertions]

    @property
    def success(self) -> bool:
        """True when both stages are full successes or no-ops."""
        return all(o.succeeded for o in self.outcomes)
