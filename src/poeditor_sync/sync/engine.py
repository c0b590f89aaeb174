"""Core sync engine that reconciles remote POEditor terms with local keys.

The ``TermsSyncEngine`` runs one linear workflow:

1. Flatten the local declaration tree into keys.
2. List the remote project's terms.
3. Compute insertions and removals.
4. Delete removals (only when enabled and non-empty).
5. Add insertions (only when non-empty).
6. Build and return a ``SyncReport``.

Steps 1 and 2 are fatal: any error propagates and nothing is mutated.
Steps 4 and 5 never raise for API trouble; a failed or partial batch is
recorded in its ``StageOutcome`` and the run continues, so a failed
delete does not prevent new terms from being added.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

import requests

from poeditor_sync.config import Config, SyncOptions
from poeditor_sync.core.client import PoeditorClient
from poeditor_sync.declarations import KeyWalker, load_declarations
from poeditor_sync.declarations.nodes import DeclarationNode
from poeditor_sync.errors import PoeditorSyncError, SettingsInvalid
from poeditor_sync.file_handler import validate_source_path
from poeditor_sync.sync.differ import diff_terms
from poeditor_sync.sync.models import (
    StageOutcome,
    StageStatus,
    SyncReport,
    SyncStage,
    classify_outcome,
)

logger = logging.getLogger(__name__)

TreeLoader = Callable[[Path], list[DeclarationNode]]


class TermsSyncEngine:
    """Orchestrate a full terms sync for one project.

    The client is created and closed by the caller; the engine only uses it.

    Args:
        client: POEditor API client.
        config: Connection settings (token, project id, language).
        options: Sync options (source path, root name, flags).
        tree_loader: Callable that parses the source file into a
            declaration tree (default: ``load_declarations``).
    """

    def __init__(
        self,
        client: PoeditorClient,
        config: Config,
        options: SyncOptions,
        tree_loader: TreeLoader = load_declarations,
    ) -> None:
        if not config.api_token or not config.api_token.strip():
            raise SettingsInvalid("API token cannot be empty")
        if not config.project_id or not config.project_id.strip():
            raise SettingsInvalid("Project id cannot be empty")
        if not options.enum_name or not options.enum_name.strip():
            raise SettingsInvalid("Enum name cannot be empty")

        self.client = client
        self.config = config
        self.options = options
        self.tree_loader = tree_loader
        self.walker = KeyWalker(
            root_name=options.enum_name, lowercased=options.lowercased
        )

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(self, dry_run: bool = False) -> SyncReport:
        """Execute a full sync.

        Args:
            dry_run: If ``True``, compute the difference but do not call
                the add/delete endpoints.

        Returns:
            A ``SyncReport`` with both stage outcomes.

        Raises:
            SettingsInvalid: The source file is missing.
            DeclarationError: The declaration tree cannot be flattened.
            WrongResponse: The terms list could not be read.
            requests.RequestException: Transport failure while listing terms.
        """
        started_at = datetime.now(timezone.utc).isoformat()

        local_keys = self.load_local_keys()
        remote_keys = self.load_remote_keys()

        difference = diff_terms(local_keys, remote_keys)
        logger.info(
            "Difference: %d to insert, %d to remove",
            len(difference.insertions),
            len(difference.removals),
        )

        removals = self.apply_removals(difference.removals, dry_run)
        insertions = self.apply_insertions(difference.insertions, dry_run)

        return SyncReport(
            project_id=self.config.project_id,
            language=self.config.language,
            dry_run=dry_run,
            local_count=len(local_keys),
            remote_count=len(remote_keys),
            difference=difference,
            removals=removals,
            insertions=insertions,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_local_keys(self) -> list[str]:
        """Parse the declaration source and flatten it into keys."""
        path = validate_source_path(self.options.source_path)
        logger.info("Parsing declarations from %s", path)
        tree = self.tree_loader(path)
        keys = self.walker.flatten(tree)
        logger.info("Declared keys: %d", len(keys))
        return keys

    def load_remote_keys(self) -> list[str]:
        """List the project's terms and return their keys."""
        logger.info(
            "Downloading terms of project %s (%s)",
            self.config.project_id,
            self.config.language,
        )
        keys = self.client.list_term_keys(self.config.language)
        logger.info("Remote terms: %d", len(keys))
        return keys

    # ------------------------------------------------------------------
    # Mutation stages
    # ------------------------------------------------------------------

    def apply_removals(
        self, terms: list[str], dry_run: bool = False
    ) -> StageOutcome:
        """Delete *terms* remotely when deletion is enabled."""
        if not self.options.delete_removals:
            if terms:
                logger.info(
                    "Delete removals disabled; keeping %d remote terms",
                    len(terms),
                )
            return StageOutcome.no_op(SyncStage.DELETE, "disabled", terms)
        return self._apply_stage(
            SyncStage.DELETE,
            terms,
            dry_run,
            self._submit_removals,
        )

    def apply_insertions(
        self, terms: list[str], dry_run: bool = False
    ) -> StageOutcome:
        """Add *terms* remotely."""
        return self._apply_stage(
            SyncStage.ADD,
            terms,
            dry_run,
            self._submit_insertions,
        )

    def _apply_stage(
        self,
        stage: SyncStage,
        terms: list[str],
        dry_run: bool,
        submit: Callable[[Iterable[str]], tuple[int, int]],
    ) -> StageOutcome:
        if not terms:
            logger.info("No terms to %s", stage.value)
            return StageOutcome.no_op(stage, "nothing to do")

        verb = "deleted" if stage is SyncStage.DELETE else "inserted"
        logger.info("Following %d terms will be %s:", len(terms), verb)
        for index, term in enumerate(terms, start=1):
            logger.info("  %d. %s", index, term)

        if dry_run:
            return StageOutcome.no_op(stage, "dry run", terms)

        try:
            acknowledged, parsed = submit(terms)
        except (PoeditorSyncError, requests.RequestException) as exc:
            logger.error("Failed to %s terms: %s", stage.value, exc)
            return StageOutcome(
                stage=stage,
                status=StageStatus.FAILED,
                terms=terms,
                requested=len(terms),
                acknowledged=0,
                error=str(exc),
            )

        status = classify_outcome(len(terms), acknowledged)
        if status is StageStatus.FULL_SUCCESS:
            logger.info("%s %d terms", verb.capitalize(), acknowledged)
        else:
            logger.warning(
                "%s %d of %d terms (%s)",
                verb.capitalize(),
                acknowledged,
                len(terms),
                status.value,
            )

        return StageOutcome(
            stage=stage,
            status=status,
            terms=terms,
            requested=len(terms),
            acknowledged=acknowledged,
            parsed=parsed,
        )

    def _submit_removals(self, batch: Iterable[str]) -> tuple[int, int]:
        result = self.client.delete_terms(batch)
        return result.deleted, result.parsed

    def _submit_insertions(self, batch: Iterable[str]) -> tuple[int, int]:
        result = self.client.add_terms(batch)
        return result.added, result.parsed
