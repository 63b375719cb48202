"""
Filesystem storage for recorded interactions.

Layout::

    <base_path>/
        api_example_com/
            <fingerprint>.json
        localhost_3001/
            <fingerprint>.json

One directory per target host, one pretty-printed JSON file per interaction,
named after the request fingerprint.
"""

import logging
import os
import re
import shutil
import threading
from pathlib import Path
from typing import Iterator, List

from pydantic import ValidationError

from ..core.exceptions import InteractionNotFoundError, StorageError
from ..models.interaction import Interaction
from ..utils.targets import service_directory_name
from .repository import InteractionRepository

logger = logging.getLogger(__name__)

RECORDING_SUFFIX = ".json"
_FINGERPRINT = re.compile(r"[0-9a-f]{64}")


class FileSystemRepository(InteractionRepository):
    """
    Stores each interaction as an individual JSON file.

    The base directory is created on first write; a missing base directory
    reads as an empty store. All operations are serialized with a lock.
    """

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self._lock = threading.Lock()

    def store(self, interaction: Interaction) -> None:
        fingerprint = interaction.fingerprint()
        service_dir = self.base_path / service_directory_name(interaction.metadata.target)
        path = service_dir / f"{fingerprint}{RECORDING_SUFFIX}"
        tmp_path = path.with_name(f".{path.name}.tmp")

        with self._lock:
            try:
                service_dir.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(interaction.to_json(), encoding="utf-8")
                os.replace(tmp_path, path)
            except OSError as e:
                logger.error(f"Failed to write interaction {fingerprint}: {e}")
                if tmp_path.exists():
                    tmp_path.unlink()
                raise StorageError(f"failed to write interaction file: {e}") from e

        logger.debug(f"Stored interaction {interaction.id} at {path}")

    def find(self, key: str) -> Interaction:
        with self._lock:
            # Fingerprint lookup is a direct file match
            if _FINGERPRINT.fullmatch(key):
                for path in self.base_path.glob(f"*/{key}{RECORDING_SUFFIX}"):
                    return self._read(path)
                raise InteractionNotFoundError(key)

            # Otherwise scan for the interaction id
            for path in self._recording_files():
                try:
                    interaction = self._read(path)
                except StorageError as e:
                    logger.warning(f"Skipping unreadable recording while looking up {key}: {e}")
                    continue
                if interaction.id == key:
                    return interaction

        raise InteractionNotFoundError(key)

    def find_all(self) -> List[Interaction]:
        with self._lock:
            interactions = [self._read(path) for path in self._recording_files()]

        # Newest first
        interactions.sort(key=lambda i: i.timestamp, reverse=True)
        return interactions

    def count(self) -> int:
        with self._lock:
            return sum(1 for _ in self._recording_files())

    def clear(self) -> None:
        with self._lock:
            if not self.base_path.exists():
                return

            try:
                for entry in self.base_path.iterdir():
                    if entry.is_dir() and not entry.is_symlink():
                        shutil.rmtree(entry)
                    else:
                        entry.unlink()
            except OSError as e:
                logger.error(f"Failed to clear recordings in {self.base_path}: {e}")
                raise StorageError(f"failed to clear recordings: {e}") from e

        logger.info(f"Cleared all recordings in {self.base_path}")

    def _recording_files(self) -> Iterator[Path]:
        if not self.base_path.is_dir():
            return iter(())
        return (
            path for path in self.base_path.rglob(f"*{RECORDING_SUFFIX}")
            if path.is_file() and not path.name.startswith(".")
        )

    @staticmethod
    def _read(path: Path) -> Interaction:
        try:
            return Interaction.from_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(f"failed to read interaction file {path}: {e}") from e
        except ValidationError as e:
            raise StorageError(f"failed to parse interaction file {path}: {e}") from e
