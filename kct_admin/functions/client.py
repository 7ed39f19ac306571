"""
Edge Function Client
Calls the hosted serverless functions at {SUPABASE_URL}/functions/v1/{name}.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config.settings import Settings, get_settings
from ..exceptions import FunctionInvocationError

logger = logging.getLogger(__name__)


def unwrap(body: Any) -> Any:
    """Most functions wrap their payload as {"data": ...}; return the payload."""
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


class EdgeFunctionClient:
    """
    Thin JSON client for the edge functions.

    Every failure (transport error, non-2xx status, non-JSON body, or a body
    carrying an error) raises FunctionInvocationError. There is no retry.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Settings to read the URL and service key from
            http_client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        self.settings = settings or get_settings()
        key = self.settings.supabase_service_key or self.settings.supabase_anon_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=self.settings.functions_timeout)
        self._base_url = self.settings.functions_url
        self._headers = {
            "Authorization": f"Bearer {key}",
            "apikey": key,
            "Content-Type": "application/json",
        }

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def invoke(self, name: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """POST a JSON body to a function and return the unwrapped payload."""
        return unwrap(self._request("POST", name, json=body or {}))

    def get(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a function with query parameters and return the unwrapped payload."""
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        return unwrap(self._request("GET", name, params=clean))

    def _request(self, method: str, name: str, **kwargs) -> Any:
        url = f"{self._base_url}/{name}"
        logger.debug(f"Invoking edge function {name}", extra={"method": method})

        try:
            response = self._client.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Edge function {name} unreachable: {e}")
            raise FunctionInvocationError(name, f"request failed: {e}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = _error_message(body) or response.text[:200] or response.reason_phrase
            logger.error(
                f"Edge function {name} failed",
                extra={"status_code": response.status_code, "error": message},
            )
            raise FunctionInvocationError(name, message, status_code=response.status_code,
                                          payload=body)

        if body is None:
            raise FunctionInvocationError(name, "response was not JSON",
                                          status_code=response.status_code)

        message = _error_message(body)
        if message:
            logger.error(f"Edge function {name} returned an error: {message}")
            raise FunctionInvocationError(name, message, status_code=response.status_code,
                                          payload=body)

        return body


def _error_message(body: Any) -> Optional[str]:
    """Extract an error message from {"error": {...}}, {"error": "..."} or {"success": false}."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message") or error.get("code") or "unknown error"
    if error:
        return str(error)
    if body.get("success") is False:
        return body.get("message") or "function reported failure"
    return None
