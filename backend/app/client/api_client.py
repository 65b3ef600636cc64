"""
HTTP client for the Speech Review API.
"""

from typing import Any, Dict, List, Optional

import httpx

from app.config import get_settings
from app.models.review import ReviewStatus
from app.schemas.review import MergedItem, ReviewRecordResponse, SummaryResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ReviewApiError(Exception):
    """Raised when a request to the review API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReviewApiClient:
    """
    Thin wrapper around the review endpoints.

    Any httpx.Client can be supplied, which lets tests pass a FastAPI
    TestClient in place of a network connection.
    """

    def __init__(self, base_url: str = None, http: httpx.Client = None, timeout: float = None) -> None:
        settings = get_settings()
        self.base_url: str = (base_url or settings.api_url).rstrip("/")
        self.http: httpx.Client = http or httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.api_timeout,
        )

    def __enter__(self) -> "ReviewApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    def file_url(self, item: MergedItem) -> str:
        """Absolute URL of an item's audio file."""
        return f"{self.base_url}/{item.file.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Review API request failed", method=method, path=path, error=str(e))
            raise ReviewApiError(f"{method} {path} failed: {str(e)}") from e

        if response.status_code >= 400:
            logger.error("Review API returned an error",
                         method=method,
                         path=path,
                         status_code=response.status_code)
            raise ReviewApiError(
                f"{method} {path} returned status {response.status_code}",
                status_code=response.status_code,
            )

        return response.json()

    def get_values(self) -> List[MergedItem]:
        """Fetch every dataset item merged with its review."""
        data = self._request("GET", "/api/values")
        return [MergedItem.model_validate(item) for item in data]

    def get_summary(self) -> SummaryResponse:
        """Fetch total, per-status, and remaining counts."""
        return SummaryResponse.model_validate(self._request("GET", "/api/summary"))

    def update(self, filename: str, text: str, status: ReviewStatus) -> ReviewRecordResponse:
        """Save the review of one file and return the stored record."""
        payload: Dict[str, Any] = {
            "filename": filename,
            "text": text,
            "status": ReviewStatus(status).value,
        }
        data = self._request("POST", "/api/update", json=payload)
        return ReviewRecordResponse.model_validate(data)
