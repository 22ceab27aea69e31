"""Music catalog (Deezer) API client"""

from typing import Any, Dict, Optional, Tuple, Union

import requests

from ..utils.exceptions import CatalogError, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

FETCH_FAILED = "Failed to fetch from catalog"


class CatalogClient:
    """
    Read-only client for the catalog API.

    Every request carries a (connect, read) timeout. Failures are raised
    as CatalogError once; there is no retry.
    """

    def __init__(
        self,
        api_base_url: str = "https://api.deezer.com",
        timeout: Tuple[float, float] = (5.0, 15.0),
        session: Optional[requests.Session] = None,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET an endpoint and return the decoded JSON body.

        Raises:
            CatalogError: upstream status for HTTP errors, 502 for network
                failures, timeouts, unparsable bodies or in-body API errors
        """
        url = f"{self.api_base_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning("Catalog request timed out", endpoint=endpoint, error=str(e))
            raise CatalogError(FETCH_FAILED, status_code=502, details=f"timeout: {e}")
        except requests.RequestException as e:
            logger.warning("Catalog request failed", endpoint=endpoint, error=str(e))
            raise CatalogError(FETCH_FAILED, status_code=502, details=str(e))

        logger.debug("Catalog response", endpoint=endpoint, status_code=response.status_code)

        if response.status_code >= 400:
            logger.warning(
                "Catalog returned an error status",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise CatalogError(FETCH_FAILED, status_code=response.status_code, details=response.text)

        try:
            result = response.json()
        except ValueError as e:
            raise CatalogError(FETCH_FAILED, status_code=502, details=f"invalid JSON: {e}")

        # Deezer reports some errors with HTTP 200 and an "error" object
        if isinstance(result, dict) and isinstance(result.get("error"), dict):
            error = result["error"]
            raise CatalogError(
                FETCH_FAILED,
                status_code=502,
                details=f"{error.get('type', 'Unknown')}: {error.get('message', 'Unknown error')}",
            )
        return result

    def search(self, query: str) -> Dict[str, Any]:
        if not query or not query.strip():
            raise ValidationError("Missing query parameter")
        result = self._get("search", params={"q": query})
        count = len(result.get("data") or []) if isinstance(result, dict) else 0
        logger.info("Catalog search", query=query, result_count=count)
        return result

    def track(self, track_id: Union[int, str]) -> Dict[str, Any]:
        return self._get(f"track/{track_id}")

    def album(self, album_id: Union[int, str]) -> Dict[str, Any]:
        return self._get(f"album/{album_id}")

    def artist(self, artist_id: Union[int, str]) -> Dict[str, Any]:
        return self._get(f"artist/{artist_id}")

    def close(self) -> None:
        self.session.close()
