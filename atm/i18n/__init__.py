"""Message catalogs for user-facing strings.

A ``Localizer`` is built once at startup from the requested languages and
is read-only afterwards. Catalogs are YAML maps of message id to a
``str.format`` template, stored in ``atm/i18n/catalogs/<lang>.yaml``.
Lookups fall back to ``en-US`` per message, then to the message id.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Sequence

import yaml

CATALOG_DIR = Path(__file__).parent / "catalogs"
FALLBACK_LANGUAGE = "en-US"


def requested_languages(environ: Mapping[str, str] | None = None) -> list[str]:
    """Languages the user asked for, most preferred first, as ``ll-CC`` tags.

    Reads ``LANGUAGE`` (colon-separated), then ``LC_ALL``, ``LC_MESSAGES``
    and ``LANG``, the same precedence gettext uses.
    """
    env = os.environ if environ is None else environ
    raw: list[str] = []
    if env.get("LANGUAGE"):
        raw.extend(env["LANGUAGE"].split(":"))
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        if env.get(var):
            raw.append(env[var])
            break

    tags = []
    for value in raw:
        tag = value.split(".")[0].split("@")[0].replace("_", "-")
        if tag and tag not in ("C", "POSIX") and tag not in tags:
            tags.append(tag)
    return tags


def available_languages(catalog_dir: Path = CATALOG_DIR) -> list[str]:
    return sorted(p.stem for p in catalog_dir.glob("*.yaml"))


def _load_catalog(path: Path) -> dict[str, str]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return {str(k): str(v) for k, v in data.items()}


class Localizer:
    """Resolved message catalog for one process."""

    def __init__(
        self,
        languages: Sequence[str] | None = None,
        catalog_dir: Path = CATALOG_DIR,
    ):
        if languages is None:
            languages = requested_languages()
        self.language = _negotiate(languages, available_languages(catalog_dir))
        self._fallback = _load_catalog(catalog_dir / f"{FALLBACK_LANGUAGE}.yaml")
        if self.language == FALLBACK_LANGUAGE:
            self._messages = self._fallback
        else:
            self._messages = _load_catalog(catalog_dir / f"{self.language}.yaml")

    def __call__(self, message_id: str, **args) -> str:
        template = self._messages.get(message_id) or self._fallback.get(message_id)
        if template is None:
            return message_id
        return template.format(**args)


def _negotiate(requested: Sequence[str], available: Sequence[str]) -> str:
    """Pick the first requested language we have, matching on language alone if needed."""
    for tag in requested:
        if tag in available:
            return tag
        lang = tag.split("-")[0].lower()
        for candidate in available:
            if candidate.split("-")[0].lower() == lang:
                return candidate
    return FALLBACK_LANGUAGE
