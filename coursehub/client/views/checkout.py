from coursehub.client.gateway import ApiError
from coursehub.client.navigation import login_redirect
from coursehub.client.views.base import Page


class CartPage(Page):
    def load(self) -> dict:
        return {
            "items": list(self.cart.items),
            "count": self.cart.count,
            "total": self.cart.total,
            "is_empty": self.cart.is_empty,
        }

    def remove(self, course_id: str) -> dict:
        self.cart.remove(course_id)
        self.toaster.success("Removed from cart")
        return self.load()

    def proceed(self):
        self.navigator.go("/checkout")


class CheckoutPage(Page):
    """
    Simulated checkout

    Completing it enrolls the user in every cart course in one call.
    """

    def __init__(self, app):
        super().__init__(app)
        self.processing = False

    def load(self) -> dict:
        return {
            "items": list(self.cart.items),
            "subtotal": self.cart.total,
            "total": self.cart.total,
            "is_empty": self.cart.is_empty,
            "processing": self.processing,
        }

    def checkout(self) -> bool:
        if not self.auth.user:
            self.navigator.go(login_redirect("/checkout"))
            return False
        if self.cart.is_empty:
            return False

        self.processing = True
        try:
            self.gateway.post("/enroll/multiple", json={"course_ids": self.cart.ids()})
        except ApiError as e:
            self.fail(e, "Checkout failed")
            return False
        finally:
            self.processing = False

        self.toaster.success("Enrollment successful!", icon="🎉")
        self.cart.clear()
        self.navigator.go("/dashboard")
        return True
