"""Topic manifests advertised by the repository.

Upstream publishes ``topics.json``: a JSON list of topic objects, or an
object with a ``topics`` list. Names are assumed unique.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx

from atm.config import MANIFEST_URL
from atm.errors import ManifestError
from atm.log import get_logger
from atm.models import TopicManifest

logger = get_logger(__name__)


def parse_manifests(data) -> list[TopicManifest]:
    """Build manifests from decoded ``topics.json`` content."""
    if isinstance(data, dict):
        data = data.get("topics")
    if not isinstance(data, list):
        raise ManifestError("Topic manifest must be a list of topics")

    try:
        return [TopicManifest.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ManifestError(f"Malformed topic in manifest: {e!r}") from e


def load_manifests(path: str | Path) -> list[TopicManifest]:
    """Read manifests from a local ``topics.json``."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ManifestError(f"Cannot load topic manifest {path}: {e}") from e
    return parse_manifests(data)


def fetch_manifests(url: str = MANIFEST_URL, timeout: float = 30.0) -> list[TopicManifest]:
    """Download and parse the manifest from the repository."""
    logger.debug("fetching_manifest", url=url)
    try:
        resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as e:
        raise ManifestError(f"Failed to fetch topic manifest from {url}: {e}") from e
    except ValueError as e:
        raise ManifestError(f"Topic manifest at {url} is not valid JSON: {e}") from e

    topics = parse_manifests(data)
    logger.info("manifest_fetched", url=url, topics=len(topics))
    return topics


def get_manifests(source: str | None = None) -> list[TopicManifest]:
    """Load from ``source`` (URL or file path), or fetch the default manifest."""
    if source is None:
        return fetch_manifests()
    if source.startswith(("http://", "https://")):
        return fetch_manifests(source)
    return load_manifests(source)
