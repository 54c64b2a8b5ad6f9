"""
Client-side persistent key/value storage

Mirrors browser local storage: string keys, string values, read at startup.
With no path the store lives in memory only.
"""

import json
import os
from typing import Dict, Optional

TOKEN_KEY = "coursehub_token"
CART_KEY = "coursehub_cart"


def notes_key(course_id: str, lesson_id: str) -> str:
    return f"notes_{course_id}_{lesson_id}"


class LocalStorage:
    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self):
        if not self.path:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str):
        self._data[key] = str(value)
        self._write()

    def remove_item(self, key: str):
        if self._data.pop(key, None) is not None:
            self._write()

    def clear(self):
        self._data = {}
        self._write()

    def keys(self):
        return list(self._data)
