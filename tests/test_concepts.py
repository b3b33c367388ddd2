"""Tests for the sponsor alias table and node details index."""

import json

from threatmap.concepts import (
    NodeDetailsIndex,
    SponsorAliasTable,
    SponsorEntry,
    strip_split_suffix,
)
from threatmap.graph.models import Node, NodeType


class TestSponsorEntry:
    def test_to_dict_roundtrip(self) -> None:
        entry = SponsorEntry(canonical_name="China", aliases=["china", "prc"])
        restored = SponsorEntry.from_dict(entry.to_dict())

        assert restored == entry


class TestSponsorAliasTable:
    def test_default_entries(self) -> None:
        table = SponsorAliasTable()
        assert table.resolve("china") == "China"
        assert table.resolve("Russia") == "Russian Federation"
        assert table.resolve("iran") == "Iran (Islamic Republic of)"
        assert table.resolve("north korea") == "Korea (Democratic People's Republic of)"

    def test_unknown_passes_through(self) -> None:
        table = SponsorAliasTable()
        assert table.resolve("vietnam") is None
        assert table.display_name("vietnam") == "vietnam"

    def test_add_alias(self) -> None:
        table = SponsorAliasTable()
        table.add_alias("Korea (Democratic People's Republic of)", "DPRK")

        assert table.resolve("dprk") == "Korea (Democratic People's Republic of)"
        assert "DPRK" in table.get_aliases("Korea (Democratic People's Republic of)")

    def test_add_alias_new_sponsor(self) -> None:
        table = SponsorAliasTable()
        table.add_alias("Viet Nam", "vietnam")

        assert table.display_name("Vietnam") == "Viet Nam"
        assert len(table.all_entries()) == 5

    def test_save_and_load(self, tmp_path) -> None:
        table = SponsorAliasTable()
        table.add_alias("China", "prc")
        path = tmp_path / "aliases.json"
        table.save(path)

        loaded = SponsorAliasTable.from_file(path)

        assert loaded.resolve("prc") == "China"
        assert loaded.get_aliases("China") == ["china", "prc"]

    def test_load_missing_file(self, tmp_path) -> None:
        table = SponsorAliasTable.from_file(tmp_path / "missing.json")
        assert table.resolve("china") == "China"


class TestNodeDetailsIndex:
    def test_strip_split_suffix(self) -> None:
        assert strip_split_suffix("China [S]") == "China"
        assert strip_split_suffix("China [t]") == "China"
        assert strip_split_suffix("APT28") == "APT28"
        assert strip_split_suffix("[S] China") == "[S] China"

    def test_lookup_split_node(self, node_details) -> None:
        index = NodeDetailsIndex(node_details)

        assert index.lookup("China [S]") == node_details["China"]
        assert index.lookup("China [T]") == node_details["China"]
        assert "APT28" in index
        assert index.lookup("Lazarus") is None

    def test_exact_id_fallback(self) -> None:
        index = NodeDetailsIndex({"Odd [S]": {"total_incidents": 1}})
        assert index.resolve_key("Odd [S]") == "Odd [S]"

    def test_describe_sponsor(self, node_details) -> None:
        details = NodeDetailsIndex(node_details).describe(Node("China [S]", NodeType.SPONSOR))

        assert details.key == "China"
        assert details.total_incidents == 12
        assert details.primary.label == "THREAT ACTORS SPONSORED"
        assert details.primary.entries == [("APT41", 8), ("APT1", 3), ("APT28", 1)]
        assert details.secondary.entries == []

    def test_describe_actor(self, node_details) -> None:
        details = NodeDetailsIndex(node_details).describe(Node("APT28", NodeType.ACTOR), limit=2)

        assert details.primary.label == "TOP TARGETS ATTACKED"
        assert details.primary.entries == [("Germany", 4), ("China", 2)]
        assert details.secondary.label == "SPONSORED BY"

    def test_describe_victim(self, node_details) -> None:
        details = NodeDetailsIndex(node_details).describe(Node("Germany", NodeType.VICTIM))
        data = details.to_dict()

        assert data["primary"] == {"label": "ATTACKED BY", "entries": [{"name": "APT28", "count": 4}]}
        assert data["secondary"]["label"] == "THREAT ACTORS USED"

    def test_describe_missing(self, node_details) -> None:
        assert NodeDetailsIndex(node_details).describe(Node("Lazarus")) is None

    def test_from_file(self, tmp_path, node_details) -> None:
        path = tmp_path / "node_details.json"
        path.write_text(json.dumps(node_details))

        index = NodeDetailsIndex.from_file(path)

        assert len(index) == 3
