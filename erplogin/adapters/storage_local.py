from __future__ import annotations
import json, os, tempfile
from typing import Any, Dict, Optional
from erplogin.domain.ports import StoragePort

SETTINGS_FILENAME = "user_settings.json"
_SECRET_KEYS = ("password",)


class StorageLocal(StoragePort):
    """Local filesystem storage for user settings (JSON)."""

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def settings_path(self) -> str:
        return os.path.join(self.root, SETTINGS_FILENAME)

    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        if not isinstance(payload, dict):
            raise ValueError("Settings payload must be a dict.")
        cleaned = {k: v for k, v in payload.items() if k not in _SECRET_KEYS}
        os.makedirs(self.root, exist_ok=True)
        # write to a temp file in the same directory so os.replace is atomic
        fd, tmp_path = tempfile.mkstemp(prefix="user_settings_", suffix=".tmp", dir=self.root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(cleaned, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.settings_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        path = self.settings_path
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object.")
        return data
