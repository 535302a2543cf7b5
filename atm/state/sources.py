"""Materialize subscribed topics into the APT source list and the snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from atm.config import MIRROR_URL, AtmPaths
from atm.errors import CommitError
from atm.log import get_logger
from atm.models import TopicManifest
from atm.state.snapshot import SnapshotStore, atomic_write_text

logger = get_logger(__name__)

SOURCE_HEADER = "# Generated by AOSC Topic Manager. DO NOT EDIT THIS FILE!\n"
COMPONENT = "main"


def make_topic_list(topics: Sequence[TopicManifest]) -> str:
    """One comment line and one ``deb`` line per topic, in input order."""
    return "".join(
        f"# Topic `{topic.name}`\ndeb {MIRROR_URL} {topic.name} {COMPONENT}\n"
        for topic in topics
    )


def render_source_list(topics: Sequence[TopicManifest]) -> str:
    return SOURCE_HEADER + make_topic_list(topics)


class SourceListWriter:
    """Commits a topic selection to disk.

    The source list is written first, then the snapshot. The two files are
    not updated together: if the snapshot write fails the source list is
    already new, and the next successful commit brings them back in line.
    """

    def __init__(self, paths: AtmPaths, store: SnapshotStore | None = None):
        self.paths = paths
        self.store = store or SnapshotStore(paths.state_file, paths.state_dir)

    def commit(self, topics: Sequence[TopicManifest]) -> None:
        """Write the source list and snapshot for ``topics``.

        Raises CommitError if either file cannot be written.
        """
        self.write_source_list(topics)
        self.store.write(topics)

    def write_source_list(self, topics: Sequence[TopicManifest]) -> Path:
        path = self.paths.source_list
        try:
            atomic_write_text(path, render_source_list(topics))
        except OSError as e:
            raise CommitError(f"Failed to write source list {path}: {e}") from e

        logger.info("source_list_written", path=str(path), topics=[t.name for t in topics])
        return path
