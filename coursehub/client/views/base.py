from typing import Optional

from coursehub.client.gateway import ApiError
from coursehub.client.navigation import require_user


class Page:
    """
    Base view model

    Pages receive the ClientApp services; subclasses implement load() and
    return a plain dict for rendering.
    """
    requires_auth = False
    admin_only = False

    def __init__(self, app):
        self.app = app
        self.gateway = app.gateway
        self.auth = app.auth
        self.cart = app.cart
        self.toaster = app.toaster
        self.navigator = app.navigator
        self.storage = app.storage

    def open(self) -> Optional[dict]:
        """Guard, then load; None when the guard redirected away"""
        if self.requires_auth or self.admin_only:
            if not require_user(self.auth, self.navigator, admin_only=self.admin_only):
                return None
        return self.load()

    def load(self) -> dict:
        raise NotImplementedError

    def fail(self, error: ApiError, fallback: str):
        self.toaster.error(error.message if error.message else fallback)
