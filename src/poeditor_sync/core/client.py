from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..errors import WrongResponse
from .schema import (
    AddedTerms,
    AddResult,
    ApiResponse,
    DeletedTerms,
    DeleteResult,
    ExportResult,
    ExportType,
    Term,
    TermsList,
    TermValue,
)

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# (connect, read) seconds
REQUEST_TIMEOUT = (10, 60)


class PoeditorClient:
    """Blocking client for the POEditor API v2.

    The client owns one ``requests.Session`` for its whole lifetime.
    Construct it once per run and release it with ``close()``, or use it
    as a context manager::

        with PoeditorClient(config) as client:
            terms = client.list_terms()
    """

    def __init__(self, config: Config):
        self.config = config
        self.session = self._create_session()

    def __enter__(self) -> PoeditorClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["Accept"] = "application/json"
        return session

    def _endpoint_url(self, endpoint: str) -> str:
        return f"{self.config.api_url.rstrip('/')}/{endpoint}"

    def _post(
        self, endpoint: str, payload_model: type[ModelT], **fields: str
    ) -> ModelT:
        """
        POST a form-encoded request and return the validated ``result``.

        Raises:
            requests.HTTPError: On non-2xx HTTP status.
            WrongResponse: On malformed JSON, a failed status, or a
                missing/invalid ``result`` payload.
        """
        form = {
            "api_token": self.config.api_token,
            "id": self.config.project_id,
            **fields,
        }
        logger.debug("POST %s", endpoint)
        response = self.session.post(
            self._endpoint_url(endpoint),
            data=form,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()

        try:
            envelope = ApiResponse.model_validate(response.json())
        except ValueError as e:
            # json decode errors and pydantic ValidationError are both ValueErrors
            raise WrongResponse(
                f"{endpoint}: cannot decode response envelope ({e})"
            ) from e

        status = envelope.response
        if not status.ok:
            raise WrongResponse(
                f"{endpoint}: {status.describe()}", code=status.code
            )
        if envelope.result is None:
            raise WrongResponse(
                f"{endpoint}: response has no result", code=status.code
            )

        try:
            return payload_model.model_validate(envelope.result)
        except ValidationError as e:
            raise WrongResponse(
                f"{endpoint}: unexpected result payload ({e.error_count()} errors)",
                code=status.code,
            ) from e

    @staticmethod
    def _encode_terms(terms: Iterable[str]) -> str:
        values = [TermValue(term=t).model_dump() for t in terms]
        return json.dumps(values)

    def list_terms(self, language: str | None = None) -> list[Term]:
        """
        List all terms of the project.

        Args:
            language: Language code whose translations are included
                (default: the configured language).

        Returns:
            Term records in the order the API returned them.
        """
        result = self._post(
            "terms/list",
            TermsList,
            language=language or self.config.language,
        )
        return result.terms

    def list_term_keys(self, language: str | None = None) -> list[str]:
        """Return just the ``term`` field of every project term."""
        return [t.term for t in self.list_terms(language)]

    def add_terms(self, terms: Iterable[str]) -> AddResult:
        """
        Add terms to the project in one batch.

        Returns:
            Parsed and added counts as reported by the API.
        """
        result = self._post(
            "terms/add", AddedTerms, data=self._encode_terms(terms)
        )
        return result.terms

    def delete_terms(self, terms: Iterable[str]) -> DeleteResult:
        """
        Delete terms from the project in one batch.

        Returns:
            Parsed and deleted counts as reported by the API.
        """
        result = self._post(
            "terms/delete", DeletedTerms, data=self._encode_terms(terms)
        )
        return result.terms

    def request_export(
        self,
        export_type: ExportType,
        language: str | None = None,
    ) -> str:
        """
        Ask POEditor to export a language and return the download URL.

        The URL is short-lived; fetch it right away with
        ``fetch_exported_file()``.
        """
        result = self._post(
            "projects/export",
            ExportResult,
            language=language or self.config.language,
            type=export_type.value,
            order="terms",
        )
        return result.url

    def fetch_exported_file(self, download_url: str) -> bytes:
        """
        Download an exported file.

        Raises:
            requests.HTTPError: On non-2xx HTTP status.
        """
        logger.debug("GET exported file")
        response = self.session.get(download_url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.content
