"""Work out which installed packages must go back to the stable channel.

When a topic closes, any of its packages still installed on the host came
from a repository that no longer exists, so they are reinstalled from
``stable``.
"""

from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Iterable, Protocol, Sequence

from atm.errors import InstalledStateError
from atm.log import get_logger
from atm.models import STABLE_CHANNEL, RevertDirective
from atm.system.dpkg import list_installed

logger = get_logger(__name__)


class HasPackages(Protocol):
    name: str
    packages: list[str]


def revert_set(
    closed: Iterable[HasPackages], installed: AbstractSet[str]
) -> list[RevertDirective]:
    """One directive per (closed topic, installed package) pair.

    Order follows topics, then packages within a topic. Duplicates across
    topics are kept; reinstalling a package twice is harmless.
    """
    return [
        RevertDirective(package=package, channel=STABLE_CHANNEL)
        for topic in closed
        for package in topic.packages
        if package in installed
    ]


def close_topics(closed: Sequence[HasPackages], status_path: str | Path) -> list[RevertDirective]:
    """Read the dpkg database at ``status_path`` and compute the revert set.

    Raises InstalledStateError if the database cannot be read or parsed.
    """
    path = Path(status_path)
    try:
        blob = path.read_bytes()
    except OSError as e:
        raise InstalledStateError(f"Cannot read dpkg status {path}: {e}") from e

    installed = list_installed(blob)
    directives = revert_set(closed, installed)
    logger.info(
        "revert_set_computed",
        topics=[t.name for t in closed],
        installed=len(installed),
        directives=len(directives),
    )
    return directives


def apt_install_args(directives: Sequence[RevertDirective]) -> list[str]:
    """``apt-get`` argv that reinstalls every directive's package from its channel."""
    if not directives:
        return []
    return ["apt-get", "install", "--reinstall", "--allow-downgrades"] + [
        str(d) for d in directives
    ]
