"""Pydantic models for the POEditor API v2 wire format.

Every endpoint answers with the same envelope::

    {
        "response": {"status": "success", "code": "200", "message": "OK"},
        "result": {...}
    }

``result`` is absent on failures. Only the fields this tool reads are
modelled; unknown fields are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ExportType(str, Enum):
    """File formats offered by ``projects/export``."""

    APPLE_STRINGS = "apple_strings"
    ANDROID_STRINGS = "android_strings"
    KEY_VALUE_JSON = "key_value_json"
    PO = "po"
    POT = "pot"
    MO = "mo"
    XLS = "xls"
    XLSX = "xlsx"
    CSV = "csv"
    INI = "ini"
    RESW = "resw"
    RESX = "resx"
    XLIFF = "xliff"
    PROPERTIES = "properties"
    JSON = "json"
    YML = "yml"
    XMB = "xmb"
    XTB = "xtb"


# Documented API response codes, used to enrich error messages.
RESPONSE_CODES: dict[str, str] = {
    "200": "OK",
    "401": "Missing API token",
    "4011": "Invalid API token",
    "4012": "No data sent using POST",
    "403": "No permissions",
    "4031": "No API access",
    "4032": "String limit reached",
    "4033": "Processing uploaded file",
    "4034": "Project is archived",
    "404": "Invalid API call",
    "4040": "Custom error message",
    "4042": "Data should be JSON",
    "4043": "Wrong language code",
    "4044": "Project does not contain the specified language",
    "4045": "No language specified",
    "4046": "Unable to parse file",
    "4047": "Invalid export type",
    "4048": "Too many upload requests",
    "4049": "Missing updating parameter",
    "4050": "Language already in project",
    "4051": "Invalid download URL",
    "4052": "Export file expired",
    "4053": "Project or language altered",
    "429": "Too many requests",
}


class ResponseStatus(BaseModel):
    """The ``response`` part of the envelope."""

    status: str
    code: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def describe(self) -> str:
        known = RESPONSE_CODES.get(self.code)
        if known and known.lower() != self.message.lower():
            return f"{self.message} [{known}]" if self.message else known
        return self.message or known or "unknown error"


class ApiResponse(BaseModel):
    """Top-level envelope; ``result`` is validated per endpoint."""

    response: ResponseStatus
    result: Any | None = None


class Translation(BaseModel):
    content: Any = ""
    fuzzy: int = 0
    updated: str | None = None


class Term(BaseModel):
    """One record of ``terms/list``. Only ``term`` is used for syncing."""

    term: str
    context: str = ""
    plural: str = ""
    created: str | None = None
    updated: str | None = None
    reference: str = ""
    tags: list[str] = Field(default_factory=list)
    comment: str = ""
    translation: Translation | None = None


class TermsList(BaseModel):
    terms: list[Term] = Field(default_factory=list)


class AddResult(BaseModel):
    """Counts returned by ``terms/add``."""

    parsed: int
    added: int


class DeleteResult(BaseModel):
    """Counts returned by ``terms/delete``."""

    parsed: int
    deleted: int


class AddedTerms(BaseModel):
    terms: AddResult


class DeletedTerms(BaseModel):
    terms: DeleteResult


class ExportResult(BaseModel):
    url: str


class TermValue(BaseModel):
    """Payload item for ``terms/add`` and ``terms/delete``."""

    term: str
