"""
HTTP gateway between the client tier and the CourseHub API

Adds the bearer token to every request and turns error responses into
ApiError. A 401 on an authenticated request drops the stored token and
sends the user to the login page.
"""

from typing import Any, Callable, List, Optional

import httpx

from coursehub.config import API_URL
from coursehub.client.navigation import Navigator, login_redirect
from coursehub.client.storage import LocalStorage, TOKEN_KEY

GENERIC_ERROR = "Something went wrong"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def error_message(response: httpx.Response) -> str:
    """Server-provided message, or a generic fallback"""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, list) and detail:
            # FastAPI validation errors: [{"loc": [...], "msg": "..."}]
            first = detail[0]
            if isinstance(first, dict) and first.get("msg"):
                return first["msg"]
    return GENERIC_ERROR


class ApiGateway:
    def __init__(
        self,
        storage: LocalStorage,
        navigator: Optional[Navigator] = None,
        base_url: str = API_URL,
        client: Optional[httpx.Client] = None,
        timeout: float = 20.0
    ):
        self.storage = storage
        self.navigator = navigator
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._unauthorized_hooks: List[Callable[[], None]] = []

    def on_unauthorized(self, hook: Callable[[], None]):
        self._unauthorized_hooks.append(hook)

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        token = self.storage.get_item(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _handle_unauthorized(self):
        self.storage.remove_item(TOKEN_KEY)
        for hook in self._unauthorized_hooks:
            hook()
        if self.navigator is not None:
            self.navigator.go(login_redirect(self.navigator.location))

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None
    ) -> Any:
        headers = self._headers()
        try:
            response = self.client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise ApiError(0, "Network error, please try again") from e

        if response.status_code == 401 and "Authorization" in headers:
            self._handle_unauthorized()

        if response.is_error:
            raise ApiError(response.status_code, error_message(response))

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            return response.json()
        return response.content

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self):
        self.client.close()
