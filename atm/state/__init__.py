"""Subscription state — the reconcile and materialize core.

This package provides:
- Snapshot: durable record of the topics enabled at the last commit
- Reconcile: merge the snapshot with upstream manifests, detect closed topics
- Revert: packages from closed topics that must return to stable
- Sources: write the APT source list and the snapshot for a selection
"""

from atm.state.reconcile import Reconciler, closed_topics, display_listing, enabled_topics
from atm.state.revert import close_topics, revert_set
from atm.state.snapshot import SnapshotStore
from atm.state.sources import SourceListWriter, make_topic_list

__all__ = [
    "Reconciler",
    "SnapshotStore",
    "SourceListWriter",
    "close_topics",
    "closed_topics",
    "display_listing",
    "enabled_topics",
    "make_topic_list",
    "revert_set",
]
