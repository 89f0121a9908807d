# slot_recommender/services/graph_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx

from slot_recommender.core.config import get_settings

logger = logging.getLogger(__name__)

_TOKEN_REFRESH_MARGIN_SECONDS = 60


class GraphClientError(RuntimeError):
    """
    Raised when an app-only Graph token cannot be obtained or a Graph call
    returns a non-2xx response.
    """


@dataclass
class _TokenState:
    access_token: str
    expires_at: datetime


class GraphClient:
    """
    Minimal Microsoft Graph client used to read calendar free/busy data.

    - Obtains an app-only token via the OAuth2 client-credentials flow and
      caches it in memory until shortly before expiry.
    - Exposes a single `post_json` helper, which is all `getSchedule` needs.
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = "https://graph.microsoft.com",
        scope: str = "https://graph.microsoft.com/.default",
        timeout_seconds: float = 10.0,
    ) -> None:
        if not tenant_id or not client_id or not client_secret:
            raise ValueError("tenant_id, client_id and client_secret are required")

        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._scope = scope
        self._timeout_seconds = timeout_seconds

        self._token_state: Optional[_TokenState] = None

    @property
    def token_url(self) -> str:
        return f"https://login.microsoftonline.com/{self._tenant_id}/oauth2/v2.0/token"

    def build_url(self, path: str) -> str:
        """
        Resolve `path` against the configured base URL unless it is already absolute.
        """
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _fetch_token(self) -> _TokenState:
        form = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
            "scope": self._scope,
        }

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.post(self.token_url, data=form)

        if resp.status_code != 200:
            raise GraphClientError(
                f"Failed to obtain Graph token (status={resp.status_code}): {resp.text}"
            )

        payload = resp.json()
        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in")

        if not access_token or not isinstance(expires_in, (int, float)):
            raise GraphClientError(
                "Invalid token response from Azure AD (missing access_token/expires_in)"
            )

        expires_at = datetime.now(tz=timezone.utc) + timedelta(
            seconds=float(expires_in) - _TOKEN_REFRESH_MARGIN_SECONDS
        )
        logger.debug("Obtained Graph token valid until %s", expires_at.isoformat())
        return _TokenState(access_token=access_token, expires_at=expires_at)

    async def get_access_token(self) -> str:
        """
        Return a cached token, fetching a new one when missing or about to expire.
        """
        now = datetime.now(tz=timezone.utc)
        if self._token_state is None or self._token_state.expires_at <= now:
            self._token_state = await self._fetch_token()
        return self._token_state.access_token

    async def post_json(
        self,
        path: str,
        *,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST a JSON body to Graph and return the decoded JSON response.

        Raises GraphClientError on non-2xx responses.
        """
        token = await self.get_access_token()
        request_headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        url = self.build_url(path)
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.request(
                method="POST",
                url=url,
                headers=request_headers,
                json=json,
            )

        if resp.status_code // 100 != 2:
            raise GraphClientError(
                f"Graph POST {path} failed (status={resp.status_code}): {resp.text}"
            )
        return resp.json()


_graph_client_instance: Optional[GraphClient] = None


def get_graph_client() -> GraphClient:
    """
    Lazily construct the shared GraphClient from application settings.
    """
    global _graph_client_instance
    if _graph_client_instance is None:
        settings = get_settings()
        if not settings.GRAPH_TENANT_ID or not settings.GRAPH_CLIENT_ID or not settings.GRAPH_CLIENT_SECRET:
            raise GraphClientError(
                "GRAPH_TENANT_ID, GRAPH_CLIENT_ID and GRAPH_CLIENT_SECRET must be "
                "configured to use the Graph calendar provider."
            )
        _graph_client_instance = GraphClient(
            tenant_id=settings.GRAPH_TENANT_ID,
            client_id=settings.GRAPH_CLIENT_ID,
            client_secret=settings.GRAPH_CLIENT_SECRET,
            base_url=str(settings.GRAPH_BASE_URL or "https://graph.microsoft.com"),
        )
    return _graph_client_instance
