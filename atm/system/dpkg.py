"""Read the set of installed packages from dpkg's status database.

The database is a sequence of RFC 822 style stanzas separated by blank
lines. Only ``Package`` and ``Status`` matter here; a package counts as
installed when the last word of its status is ``installed``
(``install ok installed``, ``hold ok installed``). Packages left in
``config-files`` or ``half-installed`` do not.
"""

from __future__ import annotations

import re

from atm.errors import InstalledStateError

_FIELD_RE = re.compile(r"^(?P<key>[A-Za-z0-9][A-Za-z0-9-]*):[ \t]*(?P<value>.*)$")


def parse_stanzas(text: str) -> list[dict[str, str]]:
    """Split a control file into ``{field: value}`` dicts.

    Continuation lines are folded into the preceding field. Field names are
    lower-cased.
    """
    stanzas: list[dict[str, str]] = []
    current: dict[str, str] = {}
    last_key = ""

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            if current:
                stanzas.append(current)
                current = {}
                last_key = ""
            continue

        if line[0] in " \t":
            if not last_key:
                raise InstalledStateError(f"line {lineno}: continuation without a field")
            current[last_key] += "\n" + line.strip()
            continue

        match = _FIELD_RE.match(line)
        if match is None:
            raise InstalledStateError(f"line {lineno}: malformed field {line!r}")
        last_key = match.group("key").lower()
        current[last_key] = match.group("value").strip()

    if current:
        stanzas.append(current)
    return stanzas


def list_installed(blob: bytes) -> set[str]:
    """Return the names of all installed packages in a dpkg status blob.

    Raises InstalledStateError on undecodable or malformed input.
    """
    try:
        text = blob.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InstalledStateError(f"dpkg status is not valid UTF-8: {e}") from e

    installed = set()
    for stanza in parse_stanzas(text):
        name = stanza.get("package")
        if not name:
            raise InstalledStateError(f"dpkg status stanza without a Package field: {stanza}")
        status = stanza.get("status", "").split()
        if status and status[-1] == "installed":
            installed.add(name)
    return installed
