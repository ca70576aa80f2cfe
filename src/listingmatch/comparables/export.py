from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
import csv, os, datetime, logging

import pandas as pd

from .models import MatchResult, PricingStats

DEFAULT_EXPORT_DIR = "Exports"
logger = logging.getLogger(__name__)

MATCH_COLUMNS = ["listingName", "primaryScore", "secondaryScore", "finalScore"]
PRICING_LABELS = [
    ("lowerQuartile", "Lower Quartile"),
    ("median", "Median"),
    ("upperQuartile", "Upper Quartile"),
    ("average", "Average"),
    ("min", "Min"),
    ("max", "Max"),
    ("count", "Comparables Used"),
]


def _pricing_rows(pricing: Optional[PricingStats]) -> List[Dict[str, Any]]:
    if pricing is None:
        return []
    data = pricing.as_dict()
    return [{"statistic": label, "value": data[key]} for key, label in PRICING_LABELS]


def export_matches(
    matches: Sequence[MatchResult],
    pricing: Optional[PricingStats] = None,
    out_dir: str | os.PathLike[str] | None = None,
    fmt: str = "csv",
    name: str = "matches",
) -> str:
    """Export a match score table.

    Args:
        matches: Results from ``compute_matches`` (exported in the given order).
        pricing: Optional pricing summary appended after the table (csv) or
            written to a second sheet (xlsx).
        out_dir: Output directory (created if missing) default 'Exports'.
        fmt: 'csv' (default) or 'xlsx' (pandas + openpyxl).
        name: File name prefix.

    Returns:
        Path to generated export file.
    """
    if out_dir is None:
        out_dir = DEFAULT_EXPORT_DIR
    os.makedirs(out_dir, exist_ok=True)
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    base = f"{name}_{timestamp}"
    rows = [m.as_dict() for m in matches]

    fmt = fmt.lower()
    if fmt == "xlsx":
        xlsx_path = os.path.join(out_dir, base + ".xlsx")
        with pd.ExcelWriter(xlsx_path) as writer:
            pd.DataFrame(rows, columns=MATCH_COLUMNS).to_excel(writer, sheet_name="Matches", index=False)
            if pricing is not None:
                pd.DataFrame(_pricing_rows(pricing)).to_excel(writer, sheet_name="Pricing", index=False)
        logger.info("Exported %d matches to %s", len(rows), xlsx_path)
        return xlsx_path
    if fmt != "csv":
        raise ValueError(f"unsupported export format: {fmt}")

    csv_path = os.path.join(out_dir, base + ".csv")
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=MATCH_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
        if pricing is not None:
            # Pricing summary trails the score table after a blank line
            f.write("\r\n")
            trailer = csv.writer(f)
            trailer.writerow(["statistic", "value"])
            for row in _pricing_rows(pricing):
                trailer.writerow([row["statistic"], row["value"]])
    logger.info("Exported %d matches to %s", len(rows), csv_path)
    return csv_path
