"""Command line evaluation of a base property against comparables.

Input is a JSON file shaped like the API body::

    {"baseProperty": {...}, "comparables": [{...}, ...], "config": {...}}

Prints the evaluation as JSON on stdout.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from listingmatch.comparables import (
    DEFAULT_SCORING_CONFIG,
    evaluate,
    export_matches,
    load_scoring_config,
    parse_properties,
    parse_property,
    rank_matches,
)
from listingmatch.logging_config import get_logger

logger = get_logger(__name__)


def _load_input(path: str) -> Dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("input must be a JSON object with baseProperty and comparables")
    return data


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="listingmatch-evaluate", description=__doc__.splitlines()[0])
    ap.add_argument('input', help='JSON file with baseProperty and comparables')
    ap.add_argument('--config', help='JSON tuning file merged over the default scoring tables')
    ap.add_argument('--rank', action='store_true', help='Order matches by final score (best first)')
    ap.add_argument('--export', metavar='DIR', help='Also write the score table to DIR')
    ap.add_argument('--fmt', choices=('csv', 'xlsx'), default='csv', help='Export format (default: csv)')
    ap.add_argument('--reference-year', type=int, help='Year used to derive age from yearBuilt')
    args = ap.parse_args(argv)

    try:
        data = _load_input(args.input)
        cfg = load_scoring_config(args.config) if args.config else DEFAULT_SCORING_CONFIG
        cfg = cfg.with_overrides(data.get('config'))
        base = parse_property(data.get('baseProperty'), reference_year=args.reference_year)
        comps, errors = parse_properties(data.get('comparables') or [], reference_year=args.reference_year)
        if errors:
            for e in errors:
                print(f"error: {e}", file=sys.stderr)
            return 2
        result = evaluate(base, comps, cfg)
    except (OSError, ValueError) as e:
        # ListingMatchError subclasses are ValueErrors as well
        print(f"error: {e}", file=sys.stderr)
        return 2

    matches = rank_matches(result.matches) if args.rank else result.matches
    out = result.as_dict()
    out['matches'] = [m.as_dict() for m in matches]
    if args.export:
        out['exportPath'] = export_matches(matches, result.pricing, out_dir=args.export, fmt=args.fmt)
        logger.info("Wrote %s", out['exportPath'])
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
