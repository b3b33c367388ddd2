"""Sponsor Alias Table - Map country tokens in questions to canonical sponsor names."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar


@dataclass
class SponsorEntry:
    """A canonical sponsor display name and the tokens that refer to it."""

    canonical_name: str
    aliases: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "canonical_name": self.canonical_name,
            "aliases": self.aliases,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SponsorEntry":
        return cls(
            canonical_name=data["canonical_name"],
            aliases=data.get("aliases", []),
        )


class SponsorAliasTable:
    """Lookup from lower-cased question tokens to sponsor display names.

    The display names match the sponsor node ids used in the datasets.
    Tokens that are not in the table are left for the caller to pass through.
    """

    DEFAULT_SPONSORS: ClassVar[dict[str, list[str]]] = {
        "China": ["china"],
        "Russian Federation": ["russia"],
        "Iran (Islamic Republic of)": ["iran"],
        "Korea (Democratic People's Republic of)": ["north korea"],
    }

    def __init__(self) -> None:
        self._entries: dict[str, SponsorEntry] = {}
        self._alias_index: dict[str, str] = {}
        self._populate_defaults()

    def _populate_defaults(self) -> None:
        for canonical_name, aliases in self.DEFAULT_SPONSORS.items():
            entry = SponsorEntry(canonical_name=canonical_name, aliases=list(aliases))
            self._entries[canonical_name] = entry
            self._index_entry(entry)

    def _index_entry(self, entry: SponsorEntry) -> None:
        for alias in entry.aliases:
            self._alias_index[alias.lower()] = entry.canonical_name

    def add_alias(self, canonical_name: str, alias: str) -> None:
        """Add an alias for a sponsor, creating the entry if needed."""
        entry = self._entries.setdefault(canonical_name, SponsorEntry(canonical_name=canonical_name))
        alias_lower = alias.lower()
        if alias_lower not in [a.lower() for a in entry.aliases]:
            entry.aliases.append(alias)
        self._alias_index[alias_lower] = canonical_name

    def resolve(self, token: str) -> str | None:
        """Resolve a token to its sponsor display name, or None if unknown."""
        return self._alias_index.get(token.strip().lower())

    def display_name(self, token: str) -> str:
        """Resolve a token, passing unmapped tokens through unchanged."""
        return self.resolve(token) or token

    def get_aliases(self, canonical_name: str) -> list[str]:
        entry = self._entries.get(canonical_name)
        return list(entry.aliases) if entry else []

    def all_entries(self) -> list[SponsorEntry]:
        return list(self._entries.values())

    def save(self, path: Path | str) -> None:
        """Save the table to a JSON file."""
        path = Path(path)
        data = {"entries": [entry.to_dict() for entry in self._entries.values()]}
        path.write_text(json.dumps(data, indent=2))

    def load(self, path: Path | str) -> None:
        """Merge entries from a JSON file into the table. A missing file is ignored."""
        path = Path(path)
        if not path.exists():
            return

        data = json.loads(path.read_text())
        for entry_data in data.get("entries", []):
            loaded = SponsorEntry.from_dict(entry_data)
            for alias in loaded.aliases:
                self.add_alias(loaded.canonical_name, alias)

    @classmethod
    def from_file(cls, path: Path | str) -> "SponsorAliasTable":
        table = cls()
        table.load(path)
        return table
