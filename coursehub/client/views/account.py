from urllib.parse import urlparse, parse_qs

from coursehub.client.gateway import ApiError
from coursehub.config import MIN_PASSWORD_LENGTH
from coursehub.client.views.base import Page


def redirect_target(location: str, default: str = "/") -> str:
    """The ?from= path remembered when the user was sent to login"""
    values = parse_qs(urlparse(location).query).get("from")
    return values[0] if values else default


class LoginPage(Page):
    def load(self) -> dict:
        return {"authenticating": self.auth.authenticating, "from": redirect_target(self.navigator.location)}

    def submit(self, email: str, password: str) -> bool:
        target = redirect_target(self.navigator.location)
        if not self.auth.login(email, password):
            return False
        self.navigator.go(target)
        return True


class RegisterPage(Page):
    def load(self) -> dict:
        return {"authenticating": self.auth.authenticating}

    def submit(self, name: str, email: str, password: str) -> bool:
        if len(password) < MIN_PASSWORD_LENGTH:
            self.toaster.error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            return False
        if not self.auth.register(name, email, password):
            return False
        self.navigator.go("/dashboard")
        return True


class ProfilePage(Page):
    requires_auth = True

    def load(self) -> dict:
        user = self.auth.user or {}
        return {"name": user.get("name", ""), "email": user.get("email", "")}

    def save_profile(self, name: str) -> bool:
        try:
            user = self.gateway.put("/user/profile", json={"name": name})
        except ApiError as e:
            self.fail(e, "Failed to update")
            return False
        self.auth.set_user({**(self.auth.user or {}), **user})
        self.toaster.success("Profile updated")
        return True

    def change_password(self, current_password: str, new_password: str) -> bool:
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            self.toaster.error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            return False
        try:
            self.gateway.put(
                "/user/password",
                json={"current_password": current_password, "new_password": new_password},
            )
        except ApiError as e:
            self.fail(e, "Password update failed")
            return False
        self.toaster.success("Password updated")
        return True

    def logout(self):
        self.auth.logout()
        self.navigator.go("/")
