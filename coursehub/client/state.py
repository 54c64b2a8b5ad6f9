"""
Client application state

AuthState and CartState are plain objects handed to the pages. They notify
subscribers after every transition; persistence is one such subscriber,
wired up in ClientApp.
"""

import json
from typing import Callable, List, Optional

from coursehub.client.gateway import ApiGateway, ApiError
from coursehub.client.toaster import Toaster


class Observable:
    def __init__(self):
        self._listeners: List[Callable] = []

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        """Register a listener called with the state after each change"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

# ==================== AUTH ====================

class AuthState(Observable):
    def __init__(self, gateway: ApiGateway, toaster: Toaster, token: Optional[str] = None):
        super().__init__()
        self.gateway = gateway
        self.toaster = toaster
        self.token = token
        self.user: Optional[dict] = None
        self.loading = bool(token)
        self.authenticating = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.get("is_admin"))

    def _set_session(self, token: Optional[str], user: Optional[dict]):
        self.token = token
        self.user = user
        self._notify()

    def clear_session(self):
        if self.token is None and self.user is None:
            return
        self._set_session(None, None)

    def bootstrap(self):
        """Resolve the stored token into a user, dropping it if the server refuses"""
        if not self.token:
            self.loading = False
            return
        self.loading = True
        try:
            self.user = self.gateway.get("/auth/me")
        except ApiError:
            self.clear_session()
        finally:
            self.loading = False

    def _authenticate(self, path: str, payload: dict, success: str, failure: str) -> bool:
        self.authenticating = True
        try:
            data = self.gateway.post(path, json=payload) or {}
            token = data.get("token")
            if not token:
                raise ApiError(500, "No token returned")
            self._set_session(token, data.get("user"))
            self.toaster.success(success)
            return True
        except ApiError as e:
            self.toaster.error(e.message or failure)
            return False
        finally:
            self.authenticating = False

    def login(self, email: str, password: str) -> bool:
        return self._authenticate(
            "/auth/login", {"email": email, "password": password}, "Logged in", "Login failed"
        )

    def register(self, name: str, email: str, password: str) -> bool:
        return self._authenticate(
            "/auth/register",
            {"name": name, "email": email, "password": password},
            "Registered",
            "Register failed",
        )

    def logout(self):
        self._set_session(None, None)
        self.toaster.success("Logged out")

    def set_user(self, user: dict):
        self.user = user
        self._notify()

# ==================== CART ====================

def item_id(item: dict) -> Optional[str]:
    return item.get("_id") or item.get("id")


class CartState(Observable):
    """
    Courses picked for checkout, states: empty / populated

    Each course id appears at most once.
    """

    def __init__(self, items: Optional[List[dict]] = None):
        super().__init__()
        self.items: List[dict] = list(items or [])

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total(self) -> float:
        return sum(max(item.get("price") or 0, 0) for item in self.items)

    def contains(self, course_id: str) -> bool:
        return any(item_id(item) == course_id for item in self.items)

    def add(self, course: dict) -> bool:
        """False (and no change) when the course is already in the cart"""
        if self.contains(item_id(course)):
            return False
        self.items = [*self.items, course]
        self._notify()
        return True

    def remove(self, course_id: str):
        self.items = [item for item in self.items if item_id(item) != course_id]
        self._notify()

    def clear(self):
        self.items = []
        self._notify()

    def ids(self) -> List[str]:
        return [item_id(item) for item in self.items]

    def to_json(self) -> str:
        return json.dumps(self.items)

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "CartState":
        """Unreadable saved carts start empty"""
        if not raw:
            return cls()
        try:
            items = json.loads(raw)
        except ValueError:
            return cls()
        if not isinstance(items, list):
            return cls()
        return cls([item for item in items if isinstance(item, dict)])
