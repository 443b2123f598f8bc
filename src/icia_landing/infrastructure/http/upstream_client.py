"""
Upstream Regions API Client.

Fetches pre-aggregated region statistics from an external HTTP service.
"""

from typing import Any, Optional

import requests

from icia_landing.config import UpstreamSettings, settings
from icia_landing.core.exceptions import UpstreamError
from icia_landing.infrastructure.logging import get_logger, log_duration


logger = get_logger(__name__)


class RegionsUpstreamClient:
    """
    Client for the upstream region statistics API.

    Single GET per call with a bounded timeout. No retries: a failed
    call simply hands over to the next resolution stage.
    """

    def __init__(
        self,
        upstream_settings: Optional[UpstreamSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize upstream client.

        Args:
            upstream_settings: URL, token and timeout.
            session: Pre-built HTTP session, mainly for tests.
        """
        self._settings = upstream_settings or settings.upstream
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Get or create HTTP session with auth headers."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
            if self._settings.token:
                self._session.headers["Authorization"] = f"Bearer {self._settings.token}"
        return self._session

    @log_duration("upstream_fetch_regions")
    def fetch_payload(self) -> Any:
        """
        Fetch the raw regions payload.

        Returns:
            Decoded JSON body, in whatever shape the upstream sends.

        Raises:
            UpstreamError: On timeout, network failure, non-2xx status
                or a body that is not JSON.
        """
        url = self._settings.url

        try:
            response = self.session.get(url, timeout=self._settings.timeout_seconds)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout as e:
            logger.warning(
                "Upstream regions API timeout",
                extra={"extra_fields": {"timeout": self._settings.timeout_seconds}}
            )
            raise UpstreamError(f"timeout: {e}") from e

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(
                f"Upstream regions API HTTP error: {status_code}",
                extra={"extra_fields": {"status_code": status_code}}
            )
            raise UpstreamError(f"HTTP {status_code}", status_code=status_code) from e

        except requests.exceptions.JSONDecodeError as e:
            logger.warning("Upstream regions API returned a non-JSON body")
            raise UpstreamError(f"invalid JSON: {e}") from e

        except requests.exceptions.RequestException as e:
            logger.warning(
                f"Upstream regions API request failed: {e}",
                extra={"extra_fields": {"error_type": type(e).__name__}}
            )
            raise UpstreamError(f"request failed: {e}") from e

        except UnicodeError as e:
            # http.client encodes header values as latin-1
            logger.warning("Upstream regions API token cannot be sent as a header")
            raise UpstreamError(f"invalid request headers: {e}") from e

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "RegionsUpstreamClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
