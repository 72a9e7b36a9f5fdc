"""Support Network API client.

A thin wrapper around the REST API served by ``support_network_api``.
The client uses the ``requests`` library and exposes one method per
operation a frontend or bot needs:

* :meth:`sign_up`, :meth:`log_in`, :meth:`log_out`
* :meth:`create_community`, :meth:`join_community`,
  :meth:`leave_community`, :meth:`my_communities`,
  :meth:`community_members`, :meth:`community_posts`
* :meth:`create_post`, :meth:`list_posts`
* :meth:`add_comment`, :meth:`delete_comment`
* :meth:`opt_in`, :meth:`opt_out`, :meth:`find_buddy`
* :meth:`start_chat`, :meth:`send_message`, :meth:`chat_messages`

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the decoded JSON body and ``error`` is ``None``; on failure
``data`` is ``None`` and ``error`` is a dictionary with the keys
``status_code`` and ``message``.  After :meth:`log_in` the returned
token is sent as a bearer token on every request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class SupportNetworkAPI:
    """Client for the Support Network API (version 1)."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``https://example.com``.
            token: Optional session token from a previous login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            api_prefix: Path prefix of the API version.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to the API prefix (e.g. ``/posts``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{self.api_prefix}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if response.status_code >= 400:
            try:
                err_json = response.json()
                message = err_json.get("detail") or err_json.get("msg") or str(err_json)
            except ValueError:
                message = response.text
            if not isinstance(message, str):
                message = str(message)
            logger.error("API request failed (%s): %s", response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}

        if response.content:
            return response.json(), None
        return None, None

    @staticmethod
    def _segment(value: str) -> str:
        return quote(value, safe="")

    # ------------------------------------------------------------------
    # Session and users
    # ------------------------------------------------------------------
    def sign_up(self, username: str, password: str) -> Result:
        return self._request("POST", "/users", json_body={"username": username, "password": password})

    def log_in(self, username: str, password: str) -> Result:
        """Log in and remember the session token for later requests."""
        data, error = self._request("POST", "/login", json_body={"username": username, "password": password})
        if data:
            self.token = data.get("access_token")
        return data, error

    def log_out(self) -> Result:
        data, error = self._request("POST", "/logout")
        if error is None:
            self.token = None
        return data, error

    def current_user(self) -> Result:
        return self._request("GET", "/session")

    # ------------------------------------------------------------------
    # Communities
    # ------------------------------------------------------------------
    def create_community(self, name: str) -> Result:
        return self._request("POST", "/communities", json_body={"name": name})

    def join_community(self, name: str) -> Result:
        return self._request("POST", f"/communities/{self._segment(name)}/members")

    def leave_community(self, name: str) -> Result:
        return self._request("DELETE", f"/communities/{self._segment(name)}/members")

    def my_communities(self) -> Result:
        return self._request("GET", "/communities")

    def community_members(self, name: str) -> Result:
        return self._request("GET", f"/communities/{self._segment(name)}/members")

    def community_posts(self, name: str) -> Result:
        return self._request("GET", f"/communities/{self._segment(name)}/posts")

    def add_common_symptom(self, community: str, symptom: str) -> Result:
        return self._request(
            "POST", f"/communities/{self._segment(community)}/symptoms", json_body={"symptom": symptom}
        )

    def search_by_symptom(self, symptom: str) -> Result:
        return self._request("GET", "/communities/search", params={"symptom": symptom})

    # ------------------------------------------------------------------
    # Posts and comments
    # ------------------------------------------------------------------
    def create_post(self, content: str, community: Optional[str] = None) -> Result:
        body: Dict[str, Any] = {"content": content}
        if community is not None:
            body["community"] = community
        return self._request("POST", "/posts", json_body=body)

    def list_posts(self, author: Optional[str] = None) -> Result:
        params = {"author": author} if author else None
        return self._request("GET", "/posts", params=params)

    def add_comment(self, post_id: int, content: str) -> Result:
        return self._request("POST", f"/posts/{post_id}/comments", json_body={"content": content})

    def delete_comment(self, comment_id: int) -> Result:
        return self._request("DELETE", f"/comments/{comment_id}")

    # ------------------------------------------------------------------
    # Matching and chats
    # ------------------------------------------------------------------
    def opt_in(self) -> Result:
        return self._request("POST", "/matches/optin")

    def opt_out(self) -> Result:
        return self._request("DELETE", "/matches/optout")

    def find_buddy(self) -> Result:
        return self._request("POST", "/match")

    def start_chat(self, username: str) -> Result:
        return self._request("POST", f"/chats/{self._segment(username)}")

    def send_message(self, username: str, content: str) -> Result:
        return self._request(
            "POST", f"/chats/{self._segment(username)}/messages", json_body={"content": content}
        )

    def chat_messages(self, username: str) -> Result:
        return self._request("GET", f"/chats/{self._segment(username)}")
