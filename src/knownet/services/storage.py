"""
JSON file persistence for the knowledge graph, with rotated backups.

The graph is written as ``{statements: [...], metadata: {...}}``. Writes go
to a temporary file in the same directory and are then moved into place, so
a crash never leaves a half-written data file behind.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from knownet.config.constants import DEFAULT_MAX_BACKUPS
from knownet.errors import KnowNetError
from knownet.graph.network import KnowledgeGraph

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the data file cannot be read, written or restored."""


class JSONGraphStore:
    """Loads and saves a KnowledgeGraph from a single JSON file."""

    def __init__(self, file_path: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> None:
        self.file_path = Path(file_path).expanduser()
        self.max_backups = max_backups

    @property
    def backup_dir(self) -> Path:
        return self.file_path.parent

    def exists(self) -> bool:
        return self.file_path.exists()

    def load(self) -> KnowledgeGraph:
        """Read the graph; a missing file yields an empty graph."""
        if not self.file_path.exists():
            logger.info("No data file at %s; starting with an empty graph", self.file_path)
            return KnowledgeGraph()

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to load knowledge network: {exc}") from exc

        try:
            graph = KnowledgeGraph.from_dict(data)
        except KnowNetError as exc:
            raise StorageError(f"Failed to load knowledge network: {exc}") from exc

        logger.info("Loaded %d statements from %s", len(graph), self.file_path)
        return graph

    def save(self, graph: KnowledgeGraph) -> None:
        payload = json.dumps(graph.to_dict(), indent=2, ensure_ascii=False)
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.file_path.stem}-",
                suffix=".tmp",
                dir=self.file_path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to save knowledge network: {exc}") from exc

        logger.debug("Saved %d statements to %s", len(graph), self.file_path)

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def backup(self) -> Path:
        """Copy the data file next to itself with a timestamp, then rotate old copies."""
        if not self.file_path.exists():
            raise StorageError("No knowledge network file to backup")

        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        backup_path = self.backup_dir / f"{self.file_path.stem}-backup-{timestamp}.json"
        try:
            shutil.copy2(self.file_path, backup_path)
        except OSError as exc:
            raise StorageError(f"Failed to create backup: {exc}") from exc

        logger.info("Created backup %s", backup_path.name)
        self._rotate()
        return backup_path

    def list_backups(self) -> list[str]:
        """Backup file names, newest first."""
        if not self.backup_dir.exists():
            return []
        prefix = f"{self.file_path.stem}-backup-"
        names = [
            p.name
            for p in self.backup_dir.iterdir()
            if p.is_file() and p.name.startswith(prefix) and p.suffix == ".json"
        ]
        return sorted(names, reverse=True)

    def restore_backup(self, backup_name: str) -> KnowledgeGraph:
        """Replace the data file with *backup_name*; the current file is backed up first."""
        backup_path = self.backup_dir / backup_name
        if Path(backup_name).name != backup_name or backup_name not in self.list_backups():
            raise StorageError(f"Backup not found: {backup_name}")

        try:
            # Read first: rotation below may remove the backup being restored.
            content = backup_path.read_bytes()
            if self.file_path.exists():
                self.backup()
            self.file_path.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Failed to restore from backup: {exc}") from exc

        logger.info("Restored %s from %s", self.file_path.name, backup_name)
        return self.load()

    def _rotate(self) -> None:
        if self.max_backups <= 0:
            return
        for name in self.list_backups()[self.max_backups:]:
            try:
                (self.backup_dir / name).unlink()
                logger.debug("Rotated out backup %s", name)
            except OSError as exc:
                logger.warning("Failed to remove old backup %s: %s", name, exc)
