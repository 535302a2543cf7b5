"""Error types raised by the reconciliation and materialization layer.

Every failure propagates to the caller; nothing here retries.
"""

from __future__ import annotations


class AtmError(Exception):
    """Base class for all atm failures."""


class SnapshotError(AtmError):
    """The persisted topic snapshot could not be used."""


class SnapshotMissingError(SnapshotError):
    """No snapshot exists yet, or it could not be read from disk."""


class SnapshotCorruptError(SnapshotError):
    """The snapshot exists but its content is not a valid topic list."""


class CommitError(AtmError):
    """Writing the source list or the snapshot failed."""


class InstalledStateError(AtmError):
    """The dpkg installed-state database could not be read or parsed."""


class ManifestError(AtmError):
    """The upstream topic manifest could not be fetched or parsed."""
