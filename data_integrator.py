import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import config
from utils.logger import get_logger

logger = get_logger("data_integrator")

HISTORY_KEY = "bacdepzai_history"
PIN_HASH_KEY = "owner_pin_hash"
SHOW_COST_KEY = "owner_show_cost"


class LocalStore:
    """
    Key/value JSON file on local disk, the app's equivalent of browser
    local storage. Every call returns (ok, message, data) and never raises
    for I/O problems.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else Path(config.DATA_DIR) / config.HISTORY_FILE

    def _load(self) -> Tuple[bool, str, Dict[str, Any]]:
        if not self.path.exists():
            return True, "Empty store", {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Store file {self.path} is corrupt, treating as empty: {e}")
            return True, "Corrupt store ignored", {}
        except OSError as e:
            logger.error(f"Cannot read store {self.path}: {e}")
            return False, f"Read failed: {e}", {}

        if not isinstance(data, dict):
            logger.error(f"Store file {self.path} has unexpected shape, treating as empty")
            return True, "Corrupt store ignored", {}
        return True, "Loaded", data

    def _dump(self, data: Dict[str, Any]) -> Tuple[bool, str]:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # write to a temp file first so a crash never leaves half a file
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
            return True, "Saved"
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Cannot write store {self.path}: {e}")
            return False, f"Write failed: {e}"
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def read(self, key: str, default: Any = None) -> Tuple[bool, str, Any]:
        ok, msg, data = self._load()
        if not ok:
            return False, msg, default
        if key not in data:
            return True, "Not found", default
        return True, "Fetched", data[key]

    def write(self, key: str, value: Any) -> Tuple[bool, str, Any]:
        ok, msg, data = self._load()
        if not ok:
            return False, msg, None
        data[key] = value
        ok, msg = self._dump(data)
        return ok, msg, value if ok else None

    def remove(self, key: str) -> Tuple[bool, str, None]:
        ok, msg, data = self._load()
        if not ok:
            return False, msg, None
        if key not in data:
            return True, "Not found", None
        del data[key]
        ok, msg = self._dump(data)
        return ok, msg, None

    def clear(self) -> Tuple[bool, str, None]:
        ok, msg = self._dump({})
        return ok, msg, None
