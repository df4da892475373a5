"""Registry client for API Center analysis state and specification export.

Provides:
- AnalysisState / AnalysisStateUpdate / AnalysisStateResponse: the state
  transition messages exchanged with the registry
- RegistryClient: the capability set the analysis workflow depends on
- ApiCenterClient: a requests-based implementation against the ARM API

apianalyzer/src/apianalyzer/registry_client.py
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

import requests

from .config import RegistryConfig
from .resource_ids import ApiDefinitionResource
from .results import UniformAnalysisResult

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisState",
    "AnalysisStateUpdate",
    "AnalysisStateResponse",
    "RegistryClient",
    "RegistryError",
    "ApiCenterClient",
]


class AnalysisState(Enum):
    """Lifecycle states of one analysis run."""

    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class AnalysisStateUpdate:
    """Request body for an analysis state transition."""

    state: AnalysisState
    operation_id: Optional[str] = None
    validation_results: Optional[List[UniformAnalysisResult]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"state": self.state.value}
        if self.operation_id is not None:
            payload["operationId"] = self.operation_id
        if self.validation_results is not None:
            payload["validationResults"] = {
                "results": [result.to_dict() for result in self.validation_results]
            }
        return payload


@dataclass
class AnalysisStateResponse:
    """Registry reply to a state transition. Only meaningful for STARTED."""

    operation_id: str = ""


class RegistryError(Exception):
    """The registry rejected a request or returned an unexpected response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RegistryClient(Protocol):
    """Registry operations used by the analysis workflow."""

    def update_analysis_state(self, update: AnalysisStateUpdate) -> AnalysisStateResponse:
        """Record an analysis state transition."""
        ...

    def get_api_specification_file_content(self) -> str:
        """Return the raw specification content of the analyzed definition."""
        ...


class ApiCenterClient:
    """API Center registry client bound to one API definition."""

    def __init__(
        self,
        resource: ApiDefinitionResource,
        config: Optional[RegistryConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.resource = resource
        self.config = config or RegistryConfig()
        self.session = session or requests.Session()

    def _url(self, action: str) -> str:
        return f"{self.config.endpoint}{self.resource.resource_id}/{action}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _post(self, action: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self._url(action)
        logger.debug(f"POST {url}")
        response = self.session.post(
            url,
            params={"api-version": self.config.api_version},
            json=payload if payload is not None else {},
            headers=self._headers(),
            timeout=self.config.timeout_seconds,
        )
        logger.debug(f"HTTP response status: {response.status_code}")
        _raise_for_status(response, action)
        return response

    def update_analysis_state(self, update: AnalysisStateUpdate) -> AnalysisStateResponse:
        """POST the state transition and return the operation id, if any."""
        response = self._post("updateAnalysisState", update.to_payload())

        if not response.content:
            return AnalysisStateResponse()
        try:
            data = response.json()
        except ValueError:
            logger.debug("updateAnalysisState response is not JSON; no operation id")
            return AnalysisStateResponse()

        operation_id = data.get("operationId") if isinstance(data, dict) else None
        return AnalysisStateResponse(operation_id=operation_id or "")

    def get_api_specification_file_content(self) -> str:
        """Export the definition's specification and return its content.

        Inline exports are returned as is; link exports are downloaded.
        """
        response = self._post("exportSpecification")
        try:
            data = response.json()
        except ValueError as e:
            raise RegistryError("exportSpecification returned a non-JSON response") from e

        if not isinstance(data, dict) or "value" not in data:
            raise RegistryError(f"Unexpected exportSpecification response: {data!r}")

        export_format = str(data.get("format", "inline")).lower()
        if export_format == "inline":
            return data["value"]
        if export_format == "link":
            return self._download(data["value"])

        raise RegistryError(f"Unsupported specification export format: {export_format}")

    def _download(self, link: str) -> str:
        logger.debug("Downloading exported specification")
        response = self.session.get(link, timeout=self.config.timeout_seconds)
        _raise_for_status(response, "specification download")
        return response.text


def _raise_for_status(response: requests.Response, action: str) -> None:
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise RegistryError(
            f"{action} failed with HTTP {response.status_code}: {response.text[:500]}",
            status_code=response.status_code,
        ) from e
