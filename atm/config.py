"""Fixed filesystem locations and upstream endpoints.

None of these are user-configurable. ``AtmPaths.under`` re-roots every
path at once, which is how chroots, images and tests point atm elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MIRROR_URL = "https://repo.aosc.io/debs"
MANIFEST_URL = f"{MIRROR_URL}/manifest/topics.json"


@dataclass(frozen=True)
class AtmPaths:
    """Where atm reads and writes on a host."""

    source_list: Path = Path("/etc/apt/sources.list.d/atm.list")
    state_dir: Path = Path("/var/lib/atm")
    state_file: Path = Path("/var/lib/atm/state")
    dpkg_status: Path = Path("/var/lib/dpkg/status")

    @classmethod
    def under(cls, root: str | Path) -> AtmPaths:
        """Return the default layout relocated below ``root``."""
        root = Path(root)
        defaults = cls()
        return cls(
            source_list=root / defaults.source_list.relative_to("/"),
            state_dir=root / defaults.state_dir.relative_to("/"),
            state_file=root / defaults.state_file.relative_to("/"),
            dpkg_status=root / defaults.dpkg_status.relative_to("/"),
        )
