"""
On-Behalf-Of Token Acquisition

Exchanges the caller's bearer token for a Microsoft Graph access token.
"""

import logging
import threading
from functools import lru_cache
from typing import Any, Dict, List, Optional

import msal
from fastapi.concurrency import run_in_threadpool

from graph_calendar.config import settings
from graph_calendar.errors import ConsentRequiredError, TokenAcquisitionError

logger = logging.getLogger(__name__)

# MSAL error codes that mean the user has to be sent back through consent
CONSENT_ERRORS = {"invalid_grant", "interaction_required", "consent_required"}


class GraphTokenProvider:
    """
    Acquires Graph tokens with the OAuth 2.0 on-behalf-of flow.

    The MSAL application is created on first use, on a threadpool worker
    together with the token exchange, since both make blocking HTTP calls.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authority: str,
        scopes: List[str],
        app: Optional[Any] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.authority = authority
        self.scopes = scopes
        self._app = app
        self._app_lock = threading.Lock()

    @property
    def app(self):
        with self._app_lock:
            if self._app is None:
                self._app = msal.ConfidentialClientApplication(
                    self.client_id,
                    client_credential=self.client_secret,
                    authority=self.authority,
                )
        return self._app

    def _exchange(self, user_assertion: str) -> Dict[str, Any]:
        return self.app.acquire_token_on_behalf_of(
            user_assertion=user_assertion,
            scopes=self.scopes,
        )

    async def acquire_token(self, user_assertion: str) -> str:
        """
        Exchange a user's bearer token for a Graph access token.

        Args:
            user_assertion: The raw bearer token the API was called with

        Returns:
            Graph access token

        Raises:
            ConsentRequiredError: consent or user interaction is required
            TokenAcquisitionError: any other token endpoint failure
        """
        result = await run_in_threadpool(self._exchange, user_assertion)

        if result and "access_token" in result:
            return result["access_token"]

        result = result or {}
        error = result.get("error", "unknown_error")
        description = result.get("error_description", "No token returned")

        if error in CONSENT_ERRORS or result.get("suberror") == "consent_required":
            raise ConsentRequiredError(f"{error}: {description}")

        logger.warning("On-behalf-of token exchange failed: %s", error)
        raise TokenAcquisitionError(f"{error}: {description}")


@lru_cache(maxsize=1)
def get_token_provider() -> GraphTokenProvider:
    return GraphTokenProvider(
        client_id=settings.AZURE_CLIENT_ID,
        client_secret=settings.AZURE_CLIENT_SECRET,
        authority=settings.authority,
        scopes=settings.GRAPH_SCOPES,
    )
