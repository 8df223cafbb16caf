"""Persistent Managed Records for reconciled domains.

Each domain owns a JSON state file below the state directory. A file holds
one or more sections (e.g. ``managed_users`` and ``managed_groups``), and a
section maps resource keys to Managed Records. A Managed Record is the only
proof that reprosetup created or adopted a resource, which is what allows
the orphan sweeper to remove it later.

Example layout of containers.json::

    {
      "containers": {
        "web": {
          "config_hash": "9f2c...",
          "image_hash": "sha256:...",
          "last_updated": "2026-01-04T10:12:00+00:00",
          "managed": true
        }
      }
    }
"""

import json
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from reprosetup.core.errors import StateIOError
from reprosetup.core.paths import ensure_state_dir, get_state_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SectionLayout:
    """Field naming of the records stored in one state section.

    Attributes:
        name: Section name in the state file.
        hash_field: Name of the fingerprint field.
        time_field: Name of the timestamp field.
    """

    name: str
    hash_field: str = "fingerprint"
    time_field: str = "last_updated"


@dataclass(frozen=True, slots=True)
class ManagedRecord:
    """Persisted proof that a resource is managed by reprosetup.

    Attributes:
        key: Resource key.
        fingerprint: Fingerprint of the declared descriptor last applied.
        last_updated: ISO 8601 timestamp of the last successful apply.
        managed: Always True for records written by the engine.
        extra: Domain specific data (uid, gid, image_hash, ...).
    """

    key: str
    fingerprint: str
    last_updated: str
    managed: bool = True
    extra: dict[str, Any] = field(default_factory=lambda: {})

    def to_dict(self, layout: SectionLayout) -> dict[str, Any]:
        """Serialize using the section's field names."""
        return {
            layout.hash_field: self.fingerprint,
            **self.extra,
            layout.time_field: self.last_updated,
            "managed": self.managed,
        }

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any], layout: SectionLayout) -> "ManagedRecord":
        """Deserialize a record.

        Raises:
            KeyError: If the fingerprint field is missing.
            TypeError: If data is not a mapping.
        """
        reserved = {layout.hash_field, layout.time_field, "managed"}
        return cls(
            key=key,
            fingerprint=str(data[layout.hash_field]),
            last_updated=str(data.get(layout.time_field, "")),
            managed=bool(data.get("managed", True)),
            extra={k: v for k, v in data.items() if k not in reserved},
        )


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


class StateSection:
    """Mutable view on one section of a StateStore."""

    def __init__(self, store: "StateStore", layout: SectionLayout) -> None:
        self._store = store
        self.layout = layout
        self._records: dict[str, ManagedRecord] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def get(self, key: str) -> ManagedRecord | None:
        """Return the record for key, or None if the key is not managed."""
        return self._records.get(key)

    def records(self) -> dict[str, ManagedRecord]:
        """Return a snapshot copy of all records in this section."""
        return dict(self._records)

    def record(self, key: str, fingerprint: str, extra: dict[str, Any] | None = None) -> ManagedRecord:
        """Create or update the record for key and persist the store.

        Args:
            key: Resource key.
            fingerprint: Fingerprint of the descriptor just applied.
            extra: Optional domain specific fields.

        Returns:
            The new record.
        """
        rec = ManagedRecord(
            key=key,
            fingerprint=fingerprint,
            last_updated=_now(),
            extra=dict(extra or {}),
        )
        self._records[key] = rec
        self._persist()
        return rec

    def forget(self, key: str) -> None:
        """Drop the record for key and persist the store."""
        if self._records.pop(key, None) is not None:
            self._persist()

    def _persist(self) -> None:
        try:
            self._store.save()
        except StateIOError as e:
            logger.warning("%s; keeping state in memory only", e)

    def _load(self, raw: object) -> None:
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed state section '%s'", self.layout.name)
            return
        for key, data in raw.items():
            try:
                self._records[key] = ManagedRecord.from_dict(key, data, self.layout)
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(
                    "Skipping corrupt record '%s' in section '%s': %s",
                    key,
                    self.layout.name,
                    e,
                )

    def _dump(self) -> dict[str, Any]:
        return {key: self._records[key].to_dict(self.layout) for key in sorted(self._records)}


class StateStore:
    """Managed Records of one domain, backed by a JSON file.

    The store is loaded once, mutated through its sections and written
    back atomically after every change, so a run interrupted after any
    successful apply leaves a consistent file behind. Unreadable or
    corrupt files are treated as empty state.

    Example:
        >>> store = StateStore.load("containers")
        >>> section = store.section(SectionLayout("containers", hash_field="config_hash"))
        >>> section.record("web", "9f2c...")
    """

    def __init__(self, path: Path) -> None:
        """Initialize an empty store.

        Args:
            path: JSON file backing this store.
        """
        self.path = path
        self._raw: dict[str, Any] = {}
        self._sections: dict[str, StateSection] = {}

    @classmethod
    def load(cls, domain: str, state_dir: Path | None = None) -> "StateStore":
        """Load the state file of a domain.

        A missing file yields an empty store; an unreadable or corrupt
        file is reported as a warning and also yields an empty store.

        Args:
            domain: State file stem (e.g., "accounts").
            state_dir: Optional override for the state directory.

        Returns:
            Loaded StateStore.
        """
        store = cls(get_state_path(domain, state_dir))
        try:
            store._raw = store._read()
        except StateIOError as e:
            logger.warning("%s; starting from empty state", e)
            store._raw = {}
        return store

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            msg = f"Cannot read state file {self.path}: {e}"
            raise StateIOError(msg) from e
        if not isinstance(data, dict):
            msg = f"State file {self.path} does not contain a JSON object"
            raise StateIOError(msg)
        return data

    def section(self, layout: SectionLayout) -> StateSection:
        """Return the section described by layout, loading it on first use."""
        existing = self._sections.get(layout.name)
        if existing is not None:
            return existing
        section = StateSection(self, layout)
        section._load(self._raw.get(layout.name, {}))
        self._sections[layout.name] = section
        return section

    def to_dict(self) -> dict[str, Any]:
        """Return the full file content, including untouched sections."""
        data = dict(self._raw)
        for name, section in self._sections.items():
            data[name] = section._dump()
        return data

    def save(self) -> Path:
        """Write the store atomically.

        The file is written to a temporary file in the same directory and
        moved into place with os.replace().

        Returns:
            Path where the state was saved.

        Raises:
            StateIOError: If the file cannot be written.
        """
        try:
            ensure_state_dir(self.path.parent)
        except RuntimeError as e:
            raise StateIOError(str(e)) from e

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(self.to_dict(), f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            msg = f"Cannot write state file {self.path}: {e}"
            raise StateIOError(msg) from e
        logger.debug("Saved state to %s", self.path)
        return self.path
