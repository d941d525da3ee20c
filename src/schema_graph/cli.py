"""Command line tool: build a schema graph from a directory of fragment files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from schema_graph.config import load_config, vsphere_config, with_overrides
from schema_graph.errors import SchemaGraphError
from schema_graph.pipeline import build_from_directory
from schema_graph.serializer import SERIALIZERS, get_serializer
from schema_graph.types import MERGE_POLICY_NAMES, ResolutionConfig


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Resolve type fragments into an ordered, inheritance-flattened schema graph"
    )
    parser.add_argument(
        "fragment_dir",
        type=Path,
        help="Directory containing fragment (.sgf) files, one per document",
    )
    config_group = parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "-c", "--config",
        type=Path,
        help="Resolution config (.sgc) with cycle seeds, round caps and merge policy",
    )
    config_group.add_argument(
        "--vsphere",
        action="store_true",
        help="Use the bundled vSphere cycle seeds",
    )
    parser.add_argument(
        "-f", "--format",
        choices=sorted(SERIALIZERS),
        default="module",
        help="Output format (default: module)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--policy",
        choices=sorted(MERGE_POLICY_NAMES),
        default=None,
        help="Override the merge tie-break policy",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=8,
        help="Number of documents extracted concurrently (default: 8)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or every resolution round (-vv)",
    )

    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if not args.fragment_dir.is_dir():
        print(f"Error: Fragment directory not found: {args.fragment_dir}", file=sys.stderr)
        return 1

    try:
        if args.config is not None:
            config = load_config(args.config)
        elif args.vsphere:
            config = vsphere_config()
        else:
            config = ResolutionConfig.default()
    except (OSError, SyntaxError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1
    if args.policy is not None:
        config = with_overrides(config, merge_policy=MERGE_POLICY_NAMES[args.policy])

    try:
        result = build_from_directory(args.fragment_dir, config, max_workers=args.jobs)
    except SchemaGraphError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.acquisition is not None and result.acquisition.failed:
        for document_id, error in sorted(result.acquisition.failed.items()):
            print(f"Warning: skipped {document_id}: {error}", file=sys.stderr)

    serializer = get_serializer(args.format)
    if args.output:
        serializer.write(result.graph, result.order, args.output)
        print(f"Wrote {len(result.order)} types to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(serializer.serialize(result.graph, result.order))

    return 0


if __name__ == "__main__":
    sys.exit(main())
