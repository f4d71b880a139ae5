"""Base Outlook client: MSAL authentication and HTTP helpers.

``requests`` and ``msal`` are imported lazily so that building entities and
filters never needs either library.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

from .constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_TENANT, GRAPH_API_SCOPES, GRAPH_API_URL

GRAPH = GRAPH_API_URL
SCOPES = list(GRAPH_API_SCOPES)
DEFAULT_TIMEOUT = DEFAULT_REQUEST_TIMEOUT

LOG = logging.getLogger(__name__)


class _TimeoutRequestsWrapper:
    """Proxy over the ``requests`` module adding a default timeout to every call."""

    def __init__(self, requests_mod: Any, timeout: Any) -> None:
        self._requests = requests_mod
        self._timeout = timeout

    def _call(self, method: str, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("timeout", self._timeout)
        LOG.debug("%s %s", method.upper(), url)
        return getattr(self._requests, method)(url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> Any:
        return self._call("get", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        return self._call("post", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Any:
        return self._call("patch", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Any:
        return self._call("put", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Any:
        return self._call("delete", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Any:
        return self._call("head", url, **kwargs)


def _requests() -> _TimeoutRequestsWrapper:
    try:
        import requests  # type: ignore
    except Exception as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("requests not installed. Run: pip install requests") from exc
    return _TimeoutRequestsWrapper(requests, DEFAULT_TIMEOUT)


def _msal():
    try:
        import msal  # type: ignore

        return msal
    except Exception as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("msal not installed. Run: pip install msal") from exc


class OutlookClientBase:
    """Holds the Graph access token and produces request headers.

    Tokens come from the MSAL cache at ``token_path`` (silent refresh) or,
    failing that, from the device-code flow.
    """

    GRAPH = GRAPH

    def __init__(
        self,
        client_id: str,
        tenant: str = DEFAULT_TENANT,
        token_path: Optional[str] = None,
    ) -> None:
        self.client_id = client_id
        self.tenant = tenant
        self.token_path = token_path
        self._token: Optional[Dict[str, Any]] = None
        self._cache: Any = None
        self._app: Any = None

    # -------------------- Token cache --------------------
    def _read_token_file(self) -> Optional[str]:
        if not self.token_path or not os.path.exists(self.token_path):
            return None
        with open(self.token_path, "r", encoding="utf-8") as fh:
            return fh.read()

    def _load_legacy_token(self, text: str) -> bool:
        """Accept a plain ``{"access_token", "expires_at"}`` file if still valid."""
        try:
            data = json.loads(text)
        except ValueError:
            return False
        if not isinstance(data, dict) or not data.get("access_token"):
            return False
        if float(data.get("expires_at") or 0) <= time.time():
            return False
        self._token = data
        return True

    def _save_cache(self) -> None:
        if not self.token_path or self._cache is None:
            return
        d = os.path.dirname(self.token_path)
        if d:
            os.makedirs(d, exist_ok=True)
        with open(self.token_path, "w", encoding="utf-8") as fh:
            fh.write(self._cache.serialize())

    def _set_token(self, result: Dict[str, Any]) -> None:
        self._token = {
            "access_token": result["access_token"],
            "expires_at": time.time() + int(result.get("expires_in") or 3600),
        }

    # -------------------- Authentication --------------------
    def authenticate(self) -> None:
        msal = _msal()
        cache = msal.SerializableTokenCache()
        text = self._read_token_file()
        if text:
            # msal accepts any JSON object, so the legacy shape is checked first
            if self._load_legacy_token(text):
                LOG.info("using legacy token file %s", self.token_path)
                return
            try:
                cache.deserialize(text)
            except ValueError:
                LOG.warning("ignoring unreadable token cache %s", self.token_path)
        app = msal.PublicClientApplication(
            self.client_id,
            authority=f"https://login.microsoftonline.com/{self.tenant}",
            token_cache=cache,
        )
        self._cache = cache
        self._app = app

        result: Optional[Dict[str, Any]] = None
        accounts = app.get_accounts()
        if accounts:
            result = app.acquire_token_silent(SCOPES, account=accounts[0])
        if not result or "access_token" not in result:
            flow = app.initiate_device_flow(scopes=SCOPES)
            if "user_code" not in flow:
                raise RuntimeError(f"Failed to start device flow: {flow.get('error')}")
            print(
                flow.get("message")
                or f"To sign in, visit {flow.get('verification_uri')} and enter code {flow['user_code']}"
            )
            result = app.acquire_token_by_device_flow(flow)
            if not result or "access_token" not in result:
                detail = (result or {}).get("error_description") or (result or {}).get("error")
                raise RuntimeError(f"Device flow failed: {detail}")
            LOG.info("signed in with device flow")
        self._set_token(result)
        self._save_cache()

    def _refresh_silently(self) -> None:
        if self._app is None:
            return
        accounts = self._app.get_accounts()
        if not accounts:
            return
        result = self._app.acquire_token_silent(SCOPES, account=accounts[0])
        if result and "access_token" in result:
            self._set_token(result)
            self._save_cache()

    def _headers(self) -> Dict[str, str]:
        if self._token is None:
            raise RuntimeError("Outlook client not authenticated; call authenticate() first")
        self._refresh_silently()
        return {
            "Authorization": f"Bearer {self._token['access_token']}",
            "Content-Type": "application/json",
        }
