from typing import List
from urllib.parse import quote


def login_redirect(current: str) -> str:
    return f"/login?from={quote(current, safe='')}"


class Navigator:
    """Current client location plus the history of visited paths"""

    def __init__(self, location: str = "/"):
        self.location = location
        self.history: List[str] = [location]

    def go(self, path: str):
        self.location = path
        self.history.append(path)

    def back(self):
        if len(self.history) > 1:
            self.history.pop()
            self.location = self.history[-1]


def require_user(auth, navigator: Navigator, admin_only: bool = False) -> bool:
    """
    Route guard for protected pages

    Logged-out users go to the login page (remembering where they were),
    non-admins hitting an admin page go home.
    """
    if not auth.user:
        navigator.go(login_redirect(navigator.location))
        return False
    if admin_only and not auth.is_admin:
        navigator.go("/")
        return False
    return True
