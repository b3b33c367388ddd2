#!/usr/bin/env python3
"""CLI for normalizing an attribution graph and asking it a question.

Usage:
    python scripts/query_cli.py data/geo_network.json "what does China target most?"
    python scripts/query_cli.py data/sector_network.json "most active sponsors" --dataset sector
    python scripts/query_cli.py data/geo_network.json "which actors have multiple state sponsors?" --json
    python scripts/query_cli.py data/geo_network.json "most targeted countries" --ambiguous-route both
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from dotenv import load_dotenv
load_dotenv()  # Must run before any threatmap.* imports

from threatmap.concepts import SponsorAliasTable
from threatmap.config import SPONSOR_ALIAS_FILE
from threatmap.graph import AmbiguousRoute, IngestionError, normalize
from threatmap.ingestion import DatasetLoader, read_json
from threatmap.routing import QueryEvaluator

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)
logger = structlog.get_logger()


def print_result(result: dict) -> None:
    intent = result["type"]

    print("\n" + "=" * 60)
    if intent == "multiple_sponsors":
        print(f"ACTORS WITH MULTIPLE STATE SPONSORS ({result['count']})")
        print("=" * 60)
        for item in result["results"]:
            print(f"  {item['actor']}")
            print(f"     {item['sponsorCount']} sponsors: {', '.join(item['sponsors'])}")
    elif intent == "country_targets":
        print(f"{result['sponsor'].upper()} - TOP TARGETS")
        print("=" * 60)
        for item in result["results"]:
            print(f"  {item['name']:<50} {item['count']} incidents")
    elif intent == "most_targeted":
        print("MOST TARGETED ENTITIES")
        print("=" * 60)
        for item in result["results"]:
            print(f"  {item['name']:<50} {item['count']} incidents")
    elif intent == "most_active":
        print(f"MOST ACTIVE {result['category'].upper()}S")
        print("=" * 60)
        for item in result["results"]:
            print(f"  {item['name']:<50} {item['count']} incidents")
    else:
        print(result["message"])


def main():
    parser = argparse.ArgumentParser(description="Query a threat attribution graph")
    parser.add_argument("path", help="Path to a {nodes, links} JSON document")
    parser.add_argument("question", help="Free-text question")
    parser.add_argument(
        "--dataset",
        choices=["geo", "sector"],
        default="geo",
        help="Dataset kind, selects the normalization policy (default: geo)",
    )
    parser.add_argument(
        "--ambiguous-route",
        choices=[route.value for route in AmbiguousRoute],
        default=None,
        help="Override where actor-role edges at split nodes are routed",
    )
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of a table")
    args = parser.parse_args()

    policy = DatasetLoader().policy_for(args.dataset)
    if args.ambiguous_route:
        policy = replace(policy, ambiguous_route=AmbiguousRoute.parse(args.ambiguous_route))

    try:
        normalized = normalize(read_json(args.path), policy)
    except (IngestionError, FileNotFoundError) as e:
        logger.error("ingestion_failed", path=args.path, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    aliases = SponsorAliasTable.from_file(SPONSOR_ALIAS_FILE) if SPONSOR_ALIAS_FILE else SponsorAliasTable()
    result = QueryEvaluator(aliases=aliases).evaluate(normalized, args.question).to_dict()

    if args.json:
        print(json.dumps({"diagnostics": normalized.diagnostics(), "result": result}, indent=2))
        return

    diagnostics = normalized.diagnostics()
    print(
        f"Normalized {diagnostics['nodes']} nodes, {diagnostics['links']} links "
        f"({diagnostics['dropped_edges']} dropped, {len(diagnostics['split_nodes'])} split)"
    )
    print_result(result)


if __name__ == "__main__":
    main()
