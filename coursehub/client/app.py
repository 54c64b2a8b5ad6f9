from typing import Optional

import httpx

from coursehub.config import API_URL
from coursehub.client.gateway import ApiGateway
from coursehub.client.navigation import Navigator
from coursehub.client.state import AuthState, CartState
from coursehub.client.storage import LocalStorage, TOKEN_KEY, CART_KEY
from coursehub.client.toaster import Toaster

# ==================== PERSISTENCE ====================

def persist_token(storage: LocalStorage):
    def listener(auth: AuthState):
        if auth.token:
            storage.set_item(TOKEN_KEY, auth.token)
        else:
            storage.remove_item(TOKEN_KEY)
    return listener


def persist_cart(storage: LocalStorage):
    def listener(cart: CartState):
        storage.set_item(CART_KEY, cart.to_json())
    return listener

# ==================== COMPOSITION ROOT ====================

class ClientApp:
    """
    Builds the client services once and hands them to every page

    Storage is read only here, at startup.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        base_url: str = API_URL,
        http_client: Optional[httpx.Client] = None
    ):
        self.storage = storage or LocalStorage()
        self.navigator = Navigator()
        self.toaster = Toaster()
        self.gateway = ApiGateway(self.storage, self.navigator, base_url=base_url, client=http_client)

        self.auth = AuthState(self.gateway, self.toaster, token=self.storage.get_item(TOKEN_KEY))
        self.cart = CartState.from_json(self.storage.get_item(CART_KEY))

        self.auth.subscribe(persist_token(self.storage))
        self.cart.subscribe(persist_cart(self.storage))
        self.gateway.on_unauthorized(self.auth.clear_session)

    def start(self) -> "ClientApp":
        self.auth.bootstrap()
        return self

    def page(self, page_cls, *args, **kwargs):
        return page_cls(self, *args, **kwargs)
