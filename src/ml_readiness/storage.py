"""Session persistence.

Opaque key-value stores for the session snapshot. Saves overwrite, there
is no versioning. Loading absent or corrupt data returns None so the engine
can fall back to a fresh session.
"""

import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .config import STORAGE_KEY_PATTERN
from .exceptions import StorageUnavailableError
from .schema import AssessmentSession

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(STORAGE_KEY_PATTERN)


class SessionStore(ABC):
    """Storage collaborator contract."""

    @abstractmethod
    def save(self, key: str, session: AssessmentSession) -> None:
        """Persist the session under key, replacing any previous value.

        Raises:
            StorageUnavailableError: If the write fails.
        """

    @abstractmethod
    def load(self, key: str) -> Optional[AssessmentSession]:
        """Return the saved session, or None if absent or unreadable as a session.

        Raises:
            StorageUnavailableError: If the backing storage cannot be read.
        """


class InMemorySessionStore(SessionStore):
    """Keeps serialized snapshots in a dict. Useful for tests and embedding."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def save(self, key: str, session: AssessmentSession) -> None:
        self._data[key] = session.model_dump_json()

    def load(self, key: str) -> Optional[AssessmentSession]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return AssessmentSession.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding corrupt session '%s': %s", key, e)
            return None

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileSessionStore(SessionStore):
    """Stores each session as ``<directory>/<key>.json``."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        """File path used for a storage key."""
        if not _KEY_PATTERN.fullmatch(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def save(self, key: str, session: AssessmentSession) -> None:
        path = self.path_for(key)
        payload = session.model_dump_json(indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageUnavailableError(f"Could not save session to {path}: {e}") from e
        logger.debug("Session saved to %s", path)

    def load(self, key: str) -> Optional[AssessmentSession]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Saved session at %s is not valid JSON: %s", path, e)
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Could not read session from {path}: {e}") from e

        try:
            return AssessmentSession.model_validate(data)
        except ValidationError as e:
            logger.warning("Saved session at %s does not match the schema: %s", path, e)
            return None

