"""
HTTP client for the blogpad API.

Sessions are passed explicitly: login/signup return a ClientSession
holding the session token, and every protected call takes one. The
underlying httpx client keeps no cookies of its own.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
import httpx
from blogpad.config import get_settings
from blogpad.errors import error_for_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientSession:
    token: str
    user: dict

    @property
    def username(self) -> str:
        return self.user["username"]


class BlogClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        settings = get_settings()
        self.cookie_name = settings.cookie_name
        self._http = http or httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BlogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- users -------------------------------------------------------------

    def signup(self, username: str, email: str, password: str) -> ClientSession:
        """Create an account. The server logs it in straight away."""
        response = self._request(
            "POST",
            "/api/v1/users/signup",
            json={"username": username, "email": email, "password": password},
        )
        return self._session_from(response)

    def login(self, email: str, password: str) -> ClientSession:
        response = self._request(
            "POST",
            "/api/v1/users/login",
            json={"email": email, "password": password},
        )
        return self._session_from(response)

    def logout(self, session: ClientSession) -> None:
        self._request("POST", "/api/v1/users/logout", session=session)
        self._http.cookies.clear()

    def me(self, session: ClientSession) -> dict:
        return self._request("GET", "/api/v1/users/me", session=session).json()

    def list_users(self) -> list[dict]:
        return self._request("GET", "/api/v1/users").json()["data"]

    # -- posts -------------------------------------------------------------

    def list_posts(self) -> list[dict]:
        return self._request("GET", "/api/v1/posts").json()["data"]

    def get_post(self, post_id: str) -> dict:
        return self._request("GET", f"/api/v1/posts/{post_id}").json()

    def create_post(self, session: ClientSession, title: str, content: str) -> dict:
        response = self._request(
            "POST",
            "/api/v1/posts",
            session=session,
            json={"title": title, "content": content},
        )
        return response.json()

    def update_post(
        self,
        session: ClientSession,
        post_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> dict:
        payload = {}
        if title is not None:
            payload["title"] = title
        if content is not None:
            payload["content"] = content
        response = self._request(
            "PUT", f"/api/v1/posts/{post_id}", session=session, json=payload
        )
        return response.json()

    def delete_post(self, session: ClientSession, post_id: str) -> None:
        self._request("DELETE", f"/api/v1/posts/{post_id}", session=session)

    # -- internals ---------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[ClientSession] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send one request; non-2xx responses raise the matching BlogError.

        Transport failures propagate as httpx.HTTPError.
        """
        headers = kwargs.pop("headers", {})
        if session is not None:
            headers["Cookie"] = f"{self.cookie_name}={session.token}"

        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            raise error_for_status(response.status_code, _detail(response))
        return response

    def _session_from(self, response: httpx.Response) -> ClientSession:
        token = response.cookies.get(self.cookie_name)
        # The token lives in ClientSession, not in a shared cookie jar
        self._http.cookies.clear()
        if not token:
            raise error_for_status(502, "Server did not return a session cookie")
        return ClientSession(token=token, user=response.json()["user"])


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or body)
    return str(body)
