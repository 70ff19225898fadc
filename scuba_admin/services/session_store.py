"""
On-disk persistence of the API session cookies.

The CLI is one process per command, so the Sanctum session cookie and the
XSRF cookie are saved after each command and restored before the next one.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from requests.cookies import RequestsCookieJar

logger = logging.getLogger(__name__)


class SessionStore:
    """
    JSON-file store for cookies, keyed by API base URL.

    Storage layout::

        {"version": "1", "last_updated": "...",
         "sessions": {"https://api.example.com": {"cookies": [...], "user": {...}}}}
    """

    STORE_VERSION = "1"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupted session file {self.path}: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Could not read session file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed session file {self.path}")
            return {}

        if data.get("version") != self.STORE_VERSION:
            logger.info(
                f"Session file version {data.get('version')!r} is not supported, ignoring"
            )
            return {}

        sessions = data.get("sessions")
        if not isinstance(sessions, dict):
            return {}
        return sessions

    def _write(self, sessions: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "version": self.STORE_VERSION,
            "last_updated": datetime.now().isoformat(),
            "sessions": sessions,
        }

        temp_fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.chmod(temp_path, 0o600)
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def load_cookies(self, base_url: str, jar: RequestsCookieJar) -> int:
        """
        Restore saved cookies for ``base_url`` into ``jar``.

        Returns:
            Number of cookies restored
        """
        entry = self._read().get(base_url) or {}
        cookies: List[Dict[str, Any]] = entry.get("cookies", [])
        for cookie in cookies:
            jar.set(
                cookie["name"],
                cookie["value"],
                domain=cookie.get("domain", ""),
                path=cookie.get("path", "/"),
            )
        if cookies:
            logger.debug(f"Restored {len(cookies)} cookies for {base_url}")
        return len(cookies)

    def save_cookies(
        self, base_url: str, jar: RequestsCookieJar, user: Optional[Dict[str, Any]] = None
    ) -> None:
        """Persist every cookie in ``jar`` for ``base_url``."""
        sessions = self._read()
        previous = sessions.get(base_url) or {}
        sessions[base_url] = {
            "cookies": [
                {
                    "name": cookie.name,
                    "value": cookie.value,
                    "domain": cookie.domain,
                    "path": cookie.path,
                }
                for cookie in jar
            ],
            "user": user if user is not None else previous.get("user"),
        }
        self._write(sessions)

    def saved_user(self, base_url: str) -> Optional[Dict[str, Any]]:
        """User record saved at login, if any."""
        return (self._read().get(base_url) or {}).get("user")

    def clear(self, base_url: str) -> None:
        """Forget the session for ``base_url``."""
        sessions = self._read()
        if sessions.pop(base_url, None) is not None:
            self._write(sessions)
            logger.debug(f"Cleared stored session for {base_url}")
