"""Workspace directory scanning and the in-memory entry model.

One ``Entry`` per immediate child directory of the tries root, with
timestamps and project-marker flags probed once at scan time.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

EPOCH_SENTINEL = 0.0

MarkerProbe = Callable[[Path], bool]


def _has_any(*names: str) -> MarkerProbe:
    """Build a probe that checks for any of ``names`` inside a directory."""

    def probe(directory: Path) -> bool:
        return any((directory / name).exists() for name in names)

    return probe


# Display order matters: row rendering walks this mapping in order.
DEFAULT_MARKERS: dict[str, MarkerProbe] = {
    "cargo": _has_any("Cargo.toml"),
    "maven": _has_any("pom.xml"),
    "flutter": _has_any("pubspec.yaml"),
    "go": _has_any("go.mod"),
    "python": _has_any("pyproject.toml", "requirements.txt"),
    "mise": _has_any("mise.toml"),
    "git": _has_any(".git"),
}


@dataclass(frozen=True)
class Entry:
    """One discovered workspace directory."""

    name: str
    modified_at: float = EPOCH_SENTINEL
    created_at: float = EPOCH_SENTINEL
    markers: frozenset[str] = frozenset()
    rank_score: int = 0

    def has_marker(self, marker: str) -> bool:
        return marker in self.markers


def probe_markers(directory: Path, markers: Mapping[str, MarkerProbe]) -> frozenset[str]:
    """Return names of markers present in ``directory``.

    A probe that raises (permission errors, symlink loops) counts as absent.
    """
    found: set[str] = set()
    for name, probe in markers.items():
        try:
            present = probe(directory)
        except (OSError, RuntimeError):
            present = False
        if present:
            found.add(name)
    return frozenset(found)


def _created_timestamp(stat: os.stat_result) -> float:
    """Return birth time when the platform exposes it, else ``st_ctime``."""
    birth = getattr(stat, "st_birthtime", None)
    if birth is not None:
        return float(birth)
    return float(stat.st_ctime)


def scan_entries(root: Path, markers: Mapping[str, MarkerProbe] | None = None) -> list[Entry]:
    """List immediate child directories of ``root`` as entries.

    Children whose metadata cannot be read are skipped. The result is sorted
    by descending ``modified_at``; ties keep enumeration order.
    """
    probes = DEFAULT_MARKERS if markers is None else markers
    entries: list[Entry] = []
    try:
        iterator = os.scandir(root)
    except OSError as exc:
        logger.warning("cannot scan {}: {}", root, exc)
        return entries

    with iterator:
        for child in iterator:
            try:
                if not child.is_dir():
                    continue
                stat = child.stat()
            except OSError as exc:
                logger.debug("skipping {}: {}", child.path, exc)
                continue
            entries.append(
                Entry(
                    name=child.name,
                    modified_at=float(stat.st_mtime),
                    created_at=_created_timestamp(stat),
                    markers=probe_markers(Path(child.path), probes),
                )
            )

    entries.sort(key=lambda entry: entry.modified_at, reverse=True)
    logger.debug("scanned {} entries under {}", len(entries), root)
    return entries


@dataclass
class EntryCollection:
    """Scan-time entries plus the currently filtered view."""

    all: list[Entry] = field(default_factory=list)
    filtered: list[Entry] = field(default_factory=list)

    @classmethod
    def from_entries(cls, entries: list[Entry]) -> EntryCollection:
        return cls(all=list(entries), filtered=list(entries))

    @classmethod
    def from_scan(cls, root: Path, markers: Mapping[str, MarkerProbe] | None = None) -> EntryCollection:
        return cls.from_entries(scan_entries(root, markers))

    def remove(self, name: str) -> bool:
        """Drop the entry called ``name`` from ``all``; return whether it existed."""
        before = len(self.all)
        self.all = [entry for entry in self.all if entry.name != name]
        return len(self.all) != before
