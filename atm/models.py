"""Topic data models — upstream manifests, persisted snapshot records, revert directives."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

STABLE_CHANNEL = "stable"


@dataclass
class TopicManifest:
    """Current, authoritative state of one topic as advertised upstream.

    ``enabled`` is decided by the user (or forced on by reconciliation);
    ``closed`` is only ever set on entries synthesized from the snapshot.
    """

    name: str
    description: str | None = None
    date: int = 0  # Unix seconds
    arch: set[str] = field(default_factory=set)
    packages: list[str] = field(default_factory=list)
    enabled: bool = False
    closed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> TopicManifest:
        """Build a manifest from an upstream ``topics.json`` record.

        Subscription flags are local state and are never taken from upstream.
        """
        return cls(
            name=data["name"],
            description=data.get("description"),
            date=int(data.get("date") or 0),
            arch=set(data.get("arch") or []),
            packages=list(data.get("packages") or []),
        )

    def copy(self) -> TopicManifest:
        return replace(self, arch=set(self.arch), packages=list(self.packages))


@dataclass
class PreviousTopic:
    """A topic that was enabled at the last commit, as stored in the snapshot."""

    name: str
    description: str | None = None
    date: int = 0
    packages: list[str] = field(default_factory=list)

    @classmethod
    def from_manifest(cls, topic: TopicManifest) -> PreviousTopic:
        return cls(
            name=topic.name,
            description=topic.description,
            date=topic.date,
            packages=list(topic.packages),
        )

    @classmethod
    def from_dict(cls, data: dict) -> PreviousTopic:
        """Parse one snapshot record, raising TypeError on any mistyped field."""
        name = data["name"]
        description = data.get("description")
        date = data.get("date", 0)
        packages = data["packages"]

        if not isinstance(name, str):
            raise TypeError(f"topic name must be a string, got {name!r}")
        if description is not None and not isinstance(description, str):
            raise TypeError(f"description of {name!r} must be a string, got {description!r}")
        # bool is an int subclass
        if isinstance(date, bool) or not isinstance(date, int):
            raise TypeError(f"date of {name!r} must be an integer, got {date!r}")
        if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
            raise TypeError(f"packages of {name!r} must be a list of strings, got {packages!r}")

        return cls(name=name, description=description, date=date, packages=list(packages))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "date": self.date,
            "packages": self.packages,
        }

    def to_manifest(self) -> TopicManifest:
        """Synthesize the closed, disabled listing entry for a vanished topic."""
        return TopicManifest(
            name=self.name,
            description=self.description,
            date=self.date,
            arch=set(),
            packages=list(self.packages),
            enabled=False,
            closed=True,
        )


@dataclass(frozen=True)
class RevertDirective:
    """Reinstall ``package`` from ``channel``."""

    package: str
    channel: str = STABLE_CHANNEL

    def __str__(self) -> str:
        return f"{self.package}/{self.channel}"
