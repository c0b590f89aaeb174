"""Terms sync engine.

Public API for reconciling a POEditor project's terms with the keys
declared in a local source file.

Modules:

- ``differ``    -- ``diff_terms``: set-based insertions/removals.
- ``engine``    -- ``TermsSyncEngine``: orchestrates a full sync run.
- ``models``    -- ``TermsDifference``, ``StageOutcome``, ``SyncReport``
  and the status enums.
- ``reporter``  -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from poeditor_sync.config import Config, SyncOptions
    from poeditor_sync.core.client import PoeditorClient
    from poeditor_sync.sync import TermsSyncEngine, format_sync_report

    config = Config(api_token="...", project_id="12345")
    options = SyncOptions(source_path="App/I18n.py")

    with PoeditorClient(config) as client:
        report = TermsSyncEngine(client, config, options).run()
    print(format_sync_report(report))
"""

from .differ import diff_terms
from .engine import TermsSyncEngine
from .models import (
    StageOutcome,
    StageStatus,
    SyncReport,
    SyncStage,
    TermsDifference,
    classify_outcome,
)
from .reporter import format_stage, format_sync_report, report_to_json

__all__ = [
    "StageOutcome",
    "StageStatus",
    "SyncReport",
    "SyncStage",
    "TermsDifference",
    "TermsSyncEngine",
    "classify_outcome",
    "diff_terms",
    "format_stage",
    "format_sync_report",
    "report_to_json",
]
