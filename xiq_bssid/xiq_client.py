from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import ApiError, AuthError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.extremecloudiq.com"


class XIQClient:
    # Minimal client for the ExtremeCloud IQ REST API.
    # - Auth via POST /login with a JSON username/password body; returns a bearer access_token.
    # - Injects the token into every later request.
    # - Maps HTTP/transport failures to AuthError (401/403) and ApiError (everything else).

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        verify: bool = True,
        timeout: int = 30,
        proxies: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.username = username
        self.password = password
        self.verify = verify
        self.timeout = timeout
        self.proxies = proxies
        self.session = session or requests.Session()
        self._token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    # Only transport hiccups are retried; a rejected password fails on the first answer.
    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    def _request_token(self) -> str:
        url = f"{self.base_url}/login"
        resp = self.session.post(
            url,
            json={"username": self.username, "password": self.password},
            verify=self.verify,
            timeout=self.timeout,
            proxies=self.proxies,
        )
        if resp.status_code in (400, 401, 403):
            raise AuthError(f"Login failed with status {resp.status_code}", {"body": resp.text[:200]})
        if not resp.ok:
            raise ApiError(f"Login request failed: {resp.text[:200]}", status_code=resp.status_code)
        try:
            token = resp.json().get("access_token")
        except ValueError:
            token = None
        if not token:
            raise AuthError("No access_token in login response")
        return token

    def login(self) -> str:
        try:
            self._token = self._request_token()
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ApiError(f"Failed to send login request: {e}") from e
        logger.info("Authenticated with XIQ API at %s", self.base_url)
        return self._token

    def _headers(self) -> Dict[str, str]:
        if not self._token:
            raise AuthError("Not authenticated. Please login first.")
        return {"Authorization": f"Bearer {self._token}", "Content-Type": "application/json"}

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method, url, headers=self._headers(), verify=self.verify,
                timeout=self.timeout, proxies=self.proxies, **kwargs
            )
        except requests.Timeout as e:
            raise ApiError(f"Request timed out after {self.timeout}s", details={"url": url}) from e
        except requests.RequestException as e:
            raise ApiError(f"Request failed: {e}", details={"url": url}) from e

        if resp.status_code in (401, 403):
            raise AuthError(f"Access denied with status {resp.status_code}", {"url": url})
        if not resp.ok:
            raise ApiError(
                f"{method} {path} failed: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        return resp

    def _json(self, resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError("Response is not valid JSON", status_code=resp.status_code) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._json(self._send("GET", path, params=params))

    def post(self, path: str, json_body: Dict[str, Any]) -> Any:
        return self._json(self._send("POST", path, json=json_body))
