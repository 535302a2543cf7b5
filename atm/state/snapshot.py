"""Persisted snapshot — the topics that were enabled at the last commit.

The snapshot is what lets the next run notice topics that vanished
upstream. It has two read modes, and callers pick one explicitly:

- ``read`` is strict. Closed-topic detection needs real history, so a
  missing or malformed snapshot is an error.
- ``read_or_empty`` is lenient. Listing topics must work on a fresh host,
  so any read failure yields an empty history.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Iterable

from atm.errors import CommitError, SnapshotCorruptError, SnapshotError, SnapshotMissingError
from atm.log import get_logger
from atm.models import PreviousTopic, TopicManifest

logger = get_logger(__name__)


class SnapshotStore:
    """Reads and writes the JSON snapshot file."""

    def __init__(self, state_file: str | Path, state_dir: str | Path | None = None):
        self.state_file = Path(state_file)
        self.state_dir = Path(state_dir) if state_dir else self.state_file.parent

    def read(self) -> list[PreviousTopic]:
        """Load the snapshot, failing if it is absent or malformed."""
        try:
            raw = self.state_file.read_bytes()
        except FileNotFoundError as e:
            raise SnapshotMissingError(f"No topic snapshot at {self.state_file}") from e
        except OSError as e:
            raise SnapshotMissingError(f"Cannot read topic snapshot {self.state_file}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise SnapshotCorruptError(f"Topic snapshot {self.state_file} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise SnapshotCorruptError(f"Topic snapshot {self.state_file} is not a list")

        try:
            return [PreviousTopic.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotCorruptError(
                f"Topic snapshot {self.state_file} has a malformed record: {e!r}"
            ) from e

    def read_or_empty(self) -> list[PreviousTopic]:
        """Load the snapshot, treating any failure as "no history"."""
        try:
            return self.read()
        except SnapshotError as e:
            logger.warning("snapshot_unavailable", path=str(self.state_file), error=str(e))
            return []

    def write(self, topics: Iterable[TopicManifest]) -> list[PreviousTopic]:
        """Replace the snapshot with the enabled subset of ``topics``.

        The new content is written to a temporary file in the state directory
        and renamed over the old snapshot, so readers never see a partial file.
        """
        previous = [PreviousTopic.from_manifest(t) for t in topics if t.enabled]
        payload = json.dumps([p.to_dict() for p in previous])

        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.state_file, payload)
        except OSError as e:
            raise CommitError(f"Failed to write topic snapshot {self.state_file}: {e}") from e

        logger.info("snapshot_written", path=str(self.state_file), topics=len(previous))
        return previous


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a sibling temp file and rename.

    Raises OSError; the temp file is removed if anything fails.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
