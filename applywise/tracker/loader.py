"""Snapshot loading for the application tracker.

A snapshot is a YAML or JSON file holding either a list of applications or a
mapping with an ``applications`` list, each entry in the at-rest shape
produced by ``JobApplication.to_dict``. Loading only reads; the tracker
never writes snapshots back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from applywise.tracker.models import JobApplication
from applywise.tracker.repository import ApplicationRepository

logger = logging.getLogger(__name__)


class SnapshotLoader:
    """Loads applications from YAML or JSON snapshot files."""

    def load(self, path: Path | str) -> list[JobApplication]:
        """Load and deserialize every application in a snapshot.

        Args:
            path: Path to a .yaml/.yml or .json file.

        Returns:
            Applications in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed or has the wrong shape.
            TrackerError: If an entry has invalid dates, statuses or priorities.
        """
        snapshot_path = Path(path)
        if not snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot not found: {snapshot_path}")

        suffix = snapshot_path.suffix.lower()
        if suffix == ".json":
            data = self._load_json(snapshot_path)
        else:
            data = self._load_yaml(snapshot_path)

        entries = self._entries(data, snapshot_path)
        applications = [JobApplication.from_dict(entry) for entry in entries]
        logger.debug("Loaded %d application(s) from %s", len(applications), path)
        return applications

    def load_into(
        self, path: Path | str, repository: ApplicationRepository
    ) -> list[JobApplication]:
        """Load a snapshot and add every application to ``repository``."""
        applications = self.load(path)
        for application in applications:
            repository.add(application)
        return applications

    def _load_yaml(self, path: Path) -> object:
        try:
            with path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML snapshot: {path}") from e

    def _load_json(self, path: Path) -> object:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON snapshot: {path}") from e

    def _entries(self, data: object, path: Path) -> list[dict]:
        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get("applications", [])
        if not isinstance(data, list):
            raise ValueError(f"Snapshot must be a list of applications: {path}")
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError(f"Snapshot entries must be mappings: {path}")
        return data
