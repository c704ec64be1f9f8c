"""
JSON File Store

Persists the whole store as a single JSON document between app runs.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from nourish.store.memory import NourishStore, StoreError, StoreSnapshot

logger = logging.getLogger(__name__)


class JsonFileStore(NourishStore):
    """NourishStore backed by a JSON file."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path).expanduser()

    def load(self) -> "JsonFileStore":
        """Read the file into memory. A missing file loads as an empty store.

        Raises:
            StoreError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            logger.info(f"No store at {self.path}, starting empty")
            self.restore(StoreSnapshot())
            return self

        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = StoreSnapshot.model_validate_json(raw)
        except (OSError, ValidationError) as e:
            logger.error(f"Error loading store from {self.path}: {e}")
            raise StoreError(f"Could not load {self.path}: {e}") from e

        self.restore(snapshot)
        logger.info(
            f"Loaded {len(snapshot.friends)} friends and "
            f"{len(snapshot.categories)} categories from {self.path}"
        )
        return self

    def save(self) -> Path:
        """Write the store atomically (temp file, then replace).

        Raises:
            StoreError: If the file cannot be written
        """
        data = self.snapshot().model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Error saving store to {self.path}: {e}")
            raise StoreError(f"Could not save {self.path}: {e}") from e

        logger.debug(f"Saved store to {self.path}")
        return self.path
