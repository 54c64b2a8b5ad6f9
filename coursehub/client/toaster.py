from collections import deque
from dataclasses import dataclass
from typing import List, Optional

MAX_TOASTS = 20


@dataclass
class Toast:
    kind: str  # success, error, info
    message: str
    icon: Optional[str] = None


class Toaster:
    """Queue of transient notifications shown to the user; oldest drop off past MAX_TOASTS"""

    def __init__(self, limit: int = MAX_TOASTS):
        self.toasts = deque(maxlen=limit)

    def success(self, message: str, icon: Optional[str] = None):
        self.toasts.append(Toast("success", message, icon))

    def error(self, message: str):
        self.toasts.append(Toast("error", message))

    def info(self, message: str, icon: Optional[str] = None):
        self.toasts.append(Toast("info", message, icon))

    @property
    def last(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None

    def drain(self) -> List[Toast]:
        toasts = list(self.toasts)
        self.toasts.clear()
        return toasts
