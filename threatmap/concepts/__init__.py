"""Reference data consumed alongside the graph.

- SponsorAliasTable: country tokens to canonical sponsor display names
- NodeDetailsIndex: per-entity breakdowns keyed by node id
"""

from .node_details import Breakdown, NodeDetails, NodeDetailsIndex, strip_split_suffix
from .sponsor_aliases import SponsorAliasTable, SponsorEntry

__all__ = [
    "Breakdown",
    "NodeDetails",
    "NodeDetailsIndex",
    "SponsorAliasTable",
    "SponsorEntry",
    "strip_split_suffix",
]
