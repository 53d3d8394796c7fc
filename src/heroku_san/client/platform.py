"""Heroku platform API client."""

import functools
import sys
from typing import Any, Dict, Optional

import httpx
import structlog

from .. import __version__
from ..config import SanSettings
from ..exceptions import HerokuAPIError
from .models import APIResponse

logger = structlog.get_logger()

UNKNOWN_MESSAGE = "???"


def _error_from_response(response: httpx.Response) -> HerokuAPIError:
    """Build a HerokuAPIError from a failed response."""
    status = response.headers.get("Status") or str(response.status_code)
    try:
        message = response.json()["error"]
    except (ValueError, KeyError, TypeError):
        message = UNKNOWN_MESSAGE
    return HerokuAPIError(status=status, message=message, response=response)


def translate_errors(func):
    """Normalize HTTP failures of an API call into HerokuAPIError.

    A one-line diagnostic goes to stderr before the error is re-raised
    without its transport traceback.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except httpx.HTTPStatusError as e:
            error = _error_from_response(e.response)
        except httpx.TransportError as e:
            error = HerokuAPIError(status=UNKNOWN_MESSAGE, message=str(e) or type(e).__name__)

        logger.error(
            "platform.request.failed",
            operation=func.__name__,
            status=error.status,
            error=error.message,
        )
        sys.stderr.write(f"\nHeroku API ERROR: {error.status} ({error.message})\n\n")
        raise error from None

    return wrapper


class HerokuAPI:
    """Client for the subset of the Heroku API used by stages."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://api.heroku.com",
        timeout: int = 30,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the API client.

        Args:
            api_key: Heroku API key
            base_url: API base URL
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests inject one); when omitted an
                isolated client is built that ignores proxy/netrc settings
                from the process environment
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            trust_env=False,
        )

    @classmethod
    def from_settings(
        cls,
        settings: SanSettings,
        client: Optional[httpx.Client] = None,
    ) -> "HerokuAPI":
        """Build a client from a settings snapshot."""
        if not settings.has_api_key:
            logger.warning("platform.api_key_missing")
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_url,
            timeout=settings.request_timeout,
            client=client,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get common headers for API requests."""
        return {
            "Accept": "application/json",
            "User-Agent": f"heroku-san/{__version__}",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> APIResponse:
        auth = ("", self.api_key) if self.api_key else None
        response = self.client.request(
            method,
            path,
            headers=self._get_headers(),
            params=params,
            json=json,
            auth=auth,
        )
        logger.debug(
            "platform.request",
            method=method,
            path=path,
            status=response.status_code,
        )
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError:
            body = response.text

        return APIResponse(
            status=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    @translate_errors
    def get_stack(self, app: str) -> APIResponse:
        """List the stacks available to an app; the current one is flagged."""
        return self._request("GET", f"/apps/{app}/stack")

    @translate_errors
    def get_config_vars(self, app: str) -> APIResponse:
        return self._request("GET", f"/apps/{app}/config_vars")

    @translate_errors
    def put_config_vars(self, app: str, config_vars: Dict[str, Any]) -> APIResponse:
        """Set config vars; the body holds the app's full resulting config."""
        return self._request("PUT", f"/apps/{app}/config_vars", json=config_vars)

    @translate_errors
    def get_addons(self, app: str) -> APIResponse:
        return self._request("GET", f"/apps/{app}/addons")

    @translate_errors
    def post_addon(
        self,
        app: str,
        addon: str,
        config: Optional[Dict[str, str]] = None,
    ) -> APIResponse:
        params = {f"config[{key}]": value for key, value in (config or {}).items()}
        return self._request("POST", f"/apps/{app}/addons/{addon}", params=params)

    @translate_errors
    def post_ps_restart(self, app: str) -> APIResponse:
        return self._request("POST", f"/apps/{app}/ps/restart")

    @translate_errors
    def post_app_maintenance(self, app: str, maintenance_mode: str) -> APIResponse:
        """Toggle maintenance mode ("1" on, "0" off)."""
        return self._request(
            "POST",
            f"/apps/{app}/server/maintenance",
            params={"maintenance_mode": maintenance_mode},
        )

    @translate_errors
    def post_app(self, params: Optional[Dict[str, str]] = None) -> APIResponse:
        """Create an app from `name`/`stack` params."""
        query = {f"app[{key}]": value for key, value in (params or {}).items()}
        return self._request("POST", "/apps", params=query)

    @translate_errors
    def get_app(self, app: str) -> APIResponse:
        return self._request("GET", f"/apps/{app}")

    @translate_errors
    def delete_app(self, app: str) -> APIResponse:
        return self._request("DELETE", f"/apps/{app}")

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "HerokuAPI":
        return self

    def __exit__(self, *exc_info):
        self.close()
