"""
Blocking JSON-over-HTTP client shared by the AWS and FX fetchers.
"""
import logging
import threading
from typing import Any, Optional

import requests

from cloudfeed.clients.provider_interface import ProviderError

logger = logging.getLogger(__name__)


class JsonHttpClient:
    """Thin wrapper around a requests session that turns failures into ProviderError."""

    def __init__(self, source: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        """
        Args:
            source: Name used in errors and logs (e.g. "aws", "fx")
            timeout: Per-request timeout in seconds, None waits indefinitely
            session: Optional session for dependency injection, shared by all threads.
                When omitted, every thread gets its own requests.Session.
        """
        self.source = source
        self.timeout = timeout
        self._injected_session = session
        self._local = threading.local()
        self._lock = threading.Lock()
        self._sessions = []

    @property
    def session(self) -> requests.Session:
        if self._injected_session is not None:
            return self._injected_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def fetch_json(self, url: str) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            ProviderError: On connection errors, non-success status codes or invalid JSON
        """
        logger.info(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(
                provider=self.source,
                message=f"Request failed for {url}: {e}",
                details={"url": url, "error_type": type(e).__name__},
            ) from e

        if not response.ok:
            raise ProviderError(
                provider=self.source,
                message=f"{response.status_code} {url}",
                details={"url": url, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                provider=self.source,
                message=f"Invalid JSON from {url}: {e}",
                details={"url": url},
            ) from e

    def close(self):
        if self._injected_session is not None:
            self._injected_session.close()
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
