"""Central configuration -- all settings driven by environment variables.

Scripts call load_dotenv() before importing threatmap, so a local .env
file can override any of these defaults.
"""

import os

# ---------------------------------------------------------------------------
# Datasets
# ---------------------------------------------------------------------------
# DATA_DIR holds sector_network.json, geo_network.json and node_details.json.

DATA_DIR = os.environ.get("THREATMAP_DATA_DIR", "data")

SECTOR_DATASET_FILE = os.environ.get("SECTOR_DATASET_FILE", "sector_network.json")
GEO_DATASET_FILE = os.environ.get("GEO_DATASET_FILE", "geo_network.json")
NODE_DETAILS_FILE = os.environ.get("NODE_DETAILS_FILE", "node_details.json")

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------
# A node acting both as sponsor and as victim is split into two nodes whose
# ids carry these suffixes.

SPLIT_SPONSOR_SUFFIX = os.environ.get("SPLIT_SPONSOR_SUFFIX", " [S]")
SPLIT_VICTIM_SUFFIX = os.environ.get("SPLIT_VICTIM_SUFFIX", " [T]")

# Where an edge goes when it touches a split node in a plain actor role:
#   "sponsor" - sponsor variant (default)
#   "victim"  - victim variant
#   "both"    - duplicate the edge to both variants
AMBIGUOUS_SPLIT_ROUTE = os.environ.get("AMBIGUOUS_SPLIT_ROUTE", "sponsor")

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

COUNTRY_TARGETS_LIMIT = int(os.environ.get("COUNTRY_TARGETS_LIMIT", "10"))
MOST_TARGETED_LIMIT = int(os.environ.get("MOST_TARGETED_LIMIT", "15"))
MOST_ACTIVE_LIMIT = int(os.environ.get("MOST_ACTIVE_LIMIT", "15"))

# Optional JSON file with extra sponsor aliases (same format as
# SponsorAliasTable.save()).
SPONSOR_ALIAS_FILE = os.environ.get("SPONSOR_ALIAS_FILE", "")

# ---------------------------------------------------------------------------
# Node details
# ---------------------------------------------------------------------------

DETAILS_TOP_N = int(os.environ.get("DETAILS_TOP_N", "10"))
