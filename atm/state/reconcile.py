"""Reconcile the persisted snapshot with the freshly fetched topic manifests.

Topics are matched by name only. A topic in the snapshot but not upstream
is closed; a topic in both is subscribed, whatever its fetched ``enabled``
flag says. Topics seen only upstream keep their flag, so newly discovered
topics stay off until the user enables them.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from atm.log import get_logger
from atm.models import PreviousTopic, TopicManifest
from atm.state.snapshot import SnapshotStore

logger = get_logger(__name__)


def closed_topics(
    current: Iterable[TopicManifest], previous: Iterable[PreviousTopic]
) -> list[PreviousTopic]:
    """Return snapshot entries that no longer exist upstream, in snapshot order."""
    current_names = {topic.name for topic in current}
    return [topic for topic in previous if topic.name not in current_names]


def display_listing(
    current: Sequence[TopicManifest], previous: Iterable[PreviousTopic]
) -> list[TopicManifest]:
    """Merge both sources into one entry per distinct topic name.

    Closed topics synthesized from the snapshot come first, in snapshot
    order, followed by every current topic in its fetched order. The
    inputs are not modified.
    """
    lookup: dict[str, TopicManifest] = {topic.name: topic.copy() for topic in current}

    listing: list[TopicManifest] = []
    for topic in previous:
        entry = lookup.get(topic.name)
        if entry is not None:
            entry.enabled = True
            continue
        listing.append(topic.to_manifest())

    listing.extend(lookup.values())
    return listing


def enabled_topics(listing: Iterable[TopicManifest]) -> list[TopicManifest]:
    """The topics a commit should keep subscribed."""
    return [topic for topic in listing if topic.enabled and not topic.closed]


class Reconciler:
    """Runs reconciliation against a snapshot store.

    The two operations read the snapshot differently: closed-topic
    detection requires history and raises if it is missing, while the
    display listing falls back to an empty history.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store

    def closed_topics(self, current: Sequence[TopicManifest]) -> list[PreviousTopic]:
        closed = closed_topics(current, self.store.read())
        if closed:
            logger.info("closed_topics_found", topics=[t.name for t in closed])
        return closed

    def display_listing(self, current: Sequence[TopicManifest]) -> list[TopicManifest]:
        return display_listing(current, self.store.read_or_empty())
