from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class ListingMatchError(Exception):
    """Base class for errors raised by the comparables core."""


class ScoringConfigError(ListingMatchError, ValueError):
    """Tolerance or weight tables that cannot produce a finite score."""


class PropertyParseError(ListingMatchError, ValueError):
    """A raw listing record could not be turned into a :class:`Property`.

    ``fields`` maps each offending field name to a short message. ``index``
    is the position of the record in the submitted list, when known.
    """

    def __init__(self, fields: Dict[str, str], index: Optional[int] = None,
                 listing_name: Optional[str] = None) -> None:
        self.fields = dict(fields)
        self.index = index
        self.listing_name = listing_name
        where = f"record {index}" if index is not None else "record"
        if listing_name:
            where += f" ({listing_name!r})"
        detail = "; ".join(f"{k}: {v}" for k, v in self.fields.items())
        super().__init__(f"Invalid {where}: {detail}")

    def as_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "listingName": self.listing_name, "fields": self.fields}


def collect_field_errors(errors: Sequence[Dict[str, Any]]) -> Dict[str, str]:
    """Flatten pydantic ``ValidationError.errors()`` output to ``{field: message}``."""
    out: Dict[str, str] = {}
    for err in errors:
        loc: List[str] = [str(p) for p in err.get("loc", ()) if p != "__root__"]
        name = ".".join(loc) or "record"
        out.setdefault(name, err.get("msg", "invalid value"))
    return out
