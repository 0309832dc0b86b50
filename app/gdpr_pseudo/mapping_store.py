# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Mapping store for original values and their pseudonyms.

Each field keeps an ordered, append-only table of (original, pseudonym) pairs.
An original value is recorded once per field; later pairs for the same original
are ignored, so the first pseudonym stays the reference.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import polars as pl

from gdpr_pseudo.exceptions import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class MappingEntry(NamedTuple):
    """Original value and the pseudonym it was replaced with."""

    original: str
    pseudonym: str


class MappingStore:
    """Per-field tables of original to pseudonym pairs."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._tables: dict[str, list[MappingEntry]] = {}
        self._lookup: dict[str, dict[str, str]] = {}

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingStore):
            return NotImplemented
        return self._tables == other._tables

    __hash__ = None

    def __repr__(self) -> str:
        sizes = ', '.join(f'{name}={len(entries)}' for name, entries in self._tables.items())
        return f'MappingStore({sizes})'

    @property
    def fields(self) -> list[str]:
        """Field names in the order they were first recorded."""
        return list(self._tables)

    def record(self, field_name: str, pairs: Iterable[tuple[str, str]]) -> int:
        """Append new pairs to a field, skipping originals already present.

        Returns:
            Number of pairs appended.
        """
        if not isinstance(field_name, str) or not field_name:
            msg = 'Field name must be a non-empty string'
            raise InvalidInputError(msg)

        entries = self._tables.setdefault(field_name, [])
        lookup = self._lookup.setdefault(field_name, {})
        added = 0

        for original, pseudonym in pairs:
            if original in lookup:
                continue

            entries.append(MappingEntry(original, pseudonym))
            lookup[original] = pseudonym
            added += 1

        return added

    def entries(self, field_name: str) -> list[MappingEntry]:
        """Return a copy of the entries recorded for a field."""
        return list(self._tables.get(field_name, []))

    def lookup(self, field_name: str, original: str) -> str | None:
        """Return the pseudonym recorded for an original value, if any."""
        return self._lookup.get(field_name, {}).get(original)

    def to_frame(self, field_name: str) -> pl.DataFrame:
        """Return the entries of a field as a DataFrame with original and pseudonym columns."""
        entries = self._tables.get(field_name, [])

        return pl.DataFrame(
            {
                'original': [entry.original for entry in entries],
                'pseudonym': [entry.pseudonym for entry in entries],
            },
            schema={'original': pl.String, 'pseudonym': pl.String},
        )

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Return the store as JSON-compatible data."""
        return {
            field_name: [entry._asdict() for entry in entries]
            for field_name, entries in self._tables.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, list[dict[str, str]]]) -> MappingStore:
        """Restore a store from data produced by ``to_dict``."""
        if not isinstance(data, dict):
            msg = 'Mapping data must be a dictionary of field tables'
            raise InvalidInputError(msg)

        store = cls()

        try:
            for field_name, rows in data.items():
                store.record(field_name, ((row['original'], row['pseudonym']) for row in rows))
        except (KeyError, TypeError) as error:
            msg = f'Invalid mapping data: {error}'
            raise InvalidInputError(msg) from error

        return store
