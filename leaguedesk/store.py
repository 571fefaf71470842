"""Local JSON store for championship projects.

All projects live in one JSON file holding a list of project records in the
persisted (camelCase) shape.  Every write re-reads the file under a lock and
upserts a single record, so saves of different projects never clobber each
other; update() additionally holds a per-project lock across its
read-modify-write so concurrent result entry on one project is serialized.

Records that fail to parse are skipped on read but kept on disk, and a file
that is not a JSON list is never overwritten.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

from leaguedesk.models import Project

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = frozenset('/\\"')


class StoreError(RuntimeError):
    """The project file exists but cannot be parsed, so it is never overwritten."""


class ProjectStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._file_lock = threading.RLock()
        self._locks_guard = threading.Lock()
        self._project_locks: dict[str, threading.Lock] = {}

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def list_projects(self) -> list[Project]:
        with self._file_lock:
            return self._read()

    def get(self, project_id: str) -> Project:
        for project in self.list_projects():
            if project.id == project_id:
                return project
        raise KeyError(f"Project not found: {project_id}")

    def save(self, project: Project) -> Project:
        """Insert the project, or replace the stored one with the same id.

        Records that cannot be parsed are written back untouched.

        Raises:
            StoreError: the file on disk is not a JSON list of records.
        """
        with self._file_lock:
            records = self._records_for_write()
            data = project.to_dict()
            for i, record in enumerate(records):
                if _record_id(record) == project.id:
                    records[i] = data
                    break
            else:
                records.append(data)
            self._write(records)
        return project

    def delete(self, project_id: str) -> None:
        with self._file_lock:
            records = self._records_for_write()
            remaining = [r for r in records if _record_id(r) != project_id]
            if len(remaining) == len(records):
                raise KeyError(f"Project not found: {project_id}")
            self._write(remaining)
        with self._locks_guard:
            self._project_locks.pop(project_id, None)
        logger.info("Deleted project %s", project_id)

    def update(self, project_id: str, fn: Callable[[Project], Project]) -> Project:
        """Apply fn to the stored project and save the result atomically."""
        # Unknown ids fail here, before a lock is allocated for them.
        self.get(project_id)
        with self._lock_for(project_id):
            current = self.get(project_id)
            updated = fn(current)
            if updated.id != project_id:
                raise ValueError("update() must not change the project id")
            return self.save(updated)

    def import_project(self, data: str | dict[str, Any]) -> Project:
        """Add an exported project, replacing any stored project with its id."""
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Import file is not valid JSON: {exc}") from exc
        project = Project.from_dict(data)
        with self._lock_for(project.id):
            self.save(project)
        logger.info("Imported project %s (%r)", project.id, project.name)
        return project

    def export_project(self, project_id: str) -> str:
        return json.dumps(self.get(project_id).to_dict(), indent=2, ensure_ascii=False)

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    def _lock_for(self, project_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._project_locks.setdefault(project_id, threading.Lock())

    def _load_records(self) -> list[Any] | None:
        """Raw records on disk, or None when the file is not a JSON list."""
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Project store %s is not valid JSON", self._path)
            return None
        if not isinstance(raw, list):
            logger.warning("Project store %s does not hold a list", self._path)
            return None
        return raw

    def _records_for_write(self) -> list[Any]:
        records = self._load_records()
        if records is None:
            raise StoreError(f"Refusing to overwrite unreadable project store {self._path}")
        return records

    def _read(self) -> list[Project]:
        projects: list[Project] = []
        for record in self._load_records() or []:
            try:
                projects.append(Project.from_dict(record))
            except ValueError as exc:
                logger.warning("Skipping unreadable project record in %s: %s", self._path, exc)
        return projects

    def _write(self, records: list[Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".projects-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _record_id(record: Any) -> Any:
    if isinstance(record, dict) and "id" in record:
        return str(record["id"])
    return None


def export_filename(project: Project) -> str:
    """Download name for an exported project, e.g. 'Serie_A_2024_config.json'.

    Path separators, quotes and control characters become underscores so the
    result is always a plain file name in the current directory.
    """
    stem = "_".join(project.name.split())
    stem = "".join("_" if ch in _UNSAFE_FILENAME_CHARS or ord(ch) < 32 else ch for ch in stem)
    return stem.lstrip(".") + "_config.json"
