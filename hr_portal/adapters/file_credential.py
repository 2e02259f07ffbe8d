"""
File Credential Adapter - Credentials persisted to a local JSON file.

The desktop analogue of browser local storage: the token survives a restart
so the console can resume the session on startup.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Union
from hr_portal.ports.credential_port import CredentialStorePort


logger = logging.getLogger(__name__)


class FileCredentialAdapter(CredentialStorePort):
    """
    JSON-file credential storage.

    The file is rewritten on every change and created with mode 0600.
    A missing or unreadable file is treated as empty.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize file credential adapter.

        Args:
            path: Location of the JSON file
        """
        self._path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable credential file %s: %s", self._path, e)
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, values: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")

        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(values, f)
        os.replace(tmp, self._path)

    def store(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def retrieve(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def delete(self, key: str) -> bool:
        values = self._read()
        if key not in values:
            return False
        del values[key]
        self._write(values)
        return True
