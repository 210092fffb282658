"""
Interaction map and central dogma tables.

Both are line-oriented, whitespace-separated text tables parsed once and
never mutated afterwards.

# Interaction Map

| Column | Meaning                                   |
|--------|-------------------------------------------|
| 1      | interaction symbol (e.g. ``-t>``)         |
| 2      | species the interaction leaves from       |
| 3      | species the interaction lands on          |
| 4      | polarity, ``positive`` or ``negative``    |

# Central Dogma

| Column | Meaning                          |
|--------|----------------------------------|
| 1      | upstream species (e.g. genome)   |
| 2      | downstream species (e.g. mRNA)   |
| 3      | interaction symbol wiring them   |
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple

from .config import CENTRAL_DOGMA, DEFAULT_INTERACTION_MAP
from .errors import FormatError, UnknownInteractionError

logger = logging.getLogger(__name__)


def tokenize(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, fields)`` for every line (1-based).

    A blank line yields no fields, which every table format rejects.
    """
    for line_number, line in enumerate(lines, start=1):
        yield line_number, line.split()


class InteractionEntry(NamedTuple):
    from_species: str
    to_species: str
    polarity: str


class InteractionMap:
    """Lookup table from interaction symbol to its species-level effect."""

    def __init__(self, entries: dict[str, InteractionEntry]) -> None:
        self._entries = dict(entries)

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: str = "interaction map") -> InteractionMap:
        entries: dict[str, InteractionEntry] = {}
        for line_number, fields in tokenize(lines):
            if len(fields) != 4:
                raise FormatError(source, line_number, "4", len(fields))
            symbol, from_species, to_species, polarity = fields
            # Later lines for the same symbol win.
            entries[symbol] = InteractionEntry(from_species, to_species, polarity)
        return cls(entries)

    @classmethod
    def parse(cls, text: str) -> InteractionMap:
        return cls.from_lines(text.splitlines())

    @classmethod
    def from_path(cls, path: Path) -> InteractionMap:
        with open(path) as f:
            imap = cls.from_lines(f, source=str(path))
        logger.info("Loaded %d interaction types from %s", len(imap), path)
        return imap

    @classmethod
    def default(cls) -> InteractionMap:
        return cls.parse(DEFAULT_INTERACTION_MAP)

    def __getitem__(self, symbol: str) -> InteractionEntry:
        try:
            return self._entries[symbol]
        except KeyError:
            raise UnknownInteractionError(symbol) from None

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InteractionMap):
            return NotImplemented
        return self._entries == other._entries

    def entries(self) -> list[tuple[str, InteractionEntry]]:
        """All ``(symbol, entry)`` pairs sorted by symbol."""
        return sorted(self._entries.items())


class CentralDogmaTemplate:
    """The genome → mRNA → protein → active cascade shared by every protein.

    ``species`` and ``steps`` are kept sorted so that node ids assigned while
    expanding an entity do not depend on the line order of the input.
    """

    def __init__(self, species: Iterable[str], steps: Iterable[str]) -> None:
        self.species: tuple[str, ...] = tuple(sorted(set(species)))
        self.steps: tuple[str, ...] = tuple(sorted(set(steps)))

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: str = "central dogma") -> CentralDogmaTemplate:
        species: set[str] = set()
        steps: set[str] = set()
        for line_number, fields in tokenize(lines):
            if len(fields) != 3:
                raise FormatError(source, line_number, "3", len(fields))
            from_species, to_species, symbol = fields
            species.update((from_species, to_species))
            steps.add(symbol)
        return cls(species, steps)

    @classmethod
    def parse(cls, text: str) -> CentralDogmaTemplate:
        return cls.from_lines(text.splitlines())

    @classmethod
    def from_path(cls, path: Path) -> CentralDogmaTemplate:
        with open(path) as f:
            return cls.from_lines(f, source=str(path))

    @classmethod
    def default(cls) -> CentralDogmaTemplate:
        return cls.parse(CENTRAL_DOGMA)

    def nodes_for(self, entity: str) -> list[tuple[str, str]]:
        """One ``(entity, species)`` pair per cascade species."""
        return [(entity, s) for s in self.species]

    def self_interactions(self, entity: str) -> list[tuple[str, str, str]]:
        """Cascade steps as ``(entity, entity, symbol)`` interactions."""
        return [(entity, entity, step) for step in self.steps]
