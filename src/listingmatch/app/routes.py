from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Dict, List, Tuple

from flask import Blueprint, current_app, jsonify, request, send_file

from listingmatch.comparables import (
    Property,
    PropertyParseError,
    ScoringConfig,
    ScoringConfigError,
    compute_matches,
    compute_pricing_stats,
    evaluate,
    export_matches,
    parse_properties,
    parse_property,
    rank_matches,
    suggest_price_range,
)

bp = Blueprint("main", __name__)
logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status: int = 400, errors: List[Dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or []


def register_error_handlers(app):  # type: ignore[no-untyped-def]
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):  # type: ignore[no-untyped-def]
        logger.warning("Rejected request to %s: %s", request.path, e.message)
        body: Dict[str, Any] = {"error": e.message}
        if e.errors:
            body["errors"] = e.errors
        return jsonify(body), e.status

    @app.errorhandler(PropertyParseError)
    def _parse_error(e: PropertyParseError):  # type: ignore[no-untyped-def]
        logger.warning("Invalid property on %s: %s", request.path, e)
        return jsonify({"error": "invalid property", "errors": [e.as_dict()]}), 400

    @app.errorhandler(ScoringConfigError)
    def _config_error(e: ScoringConfigError):  # type: ignore[no-untyped-def]
        logger.warning("Unable to compute scores on %s: %s", request.path, e)
        return jsonify({"error": "unable to compute", "detail": str(e)}), 422


def _delete_file_later(file_path: str, delay_seconds: int = 30) -> None:
    def delete_after_delay():  # pragma: no cover - side-effect timing
        time.sleep(delay_seconds)
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
        except OSError as e:
            logger.warning("Could not remove export %s: %s", file_path, e)

    threading.Thread(target=delete_after_delay, daemon=True).start()


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ApiError("request body must be a JSON object")
    return data


def _scoring_config(payload: Dict[str, Any]) -> ScoringConfig:
    cfg: ScoringConfig = current_app.config["SCORING_CONFIG"]
    overrides = payload.get("config")
    return cfg.with_overrides(overrides) if overrides else cfg


def _comparables(payload: Dict[str, Any]) -> List[Any]:
    comps = payload.get("comparables", [])
    if not isinstance(comps, list):
        raise ApiError("comparables must be a list")
    limit = current_app.config["MAX_COMPARABLES"]
    if len(comps) > limit:
        raise ApiError(f"too many comparables ({len(comps)} > {limit})", status=413)
    return comps


def _matching_inputs(payload: Dict[str, Any]) -> Tuple[Property, List[Property]]:
    if "baseProperty" not in payload:
        raise ApiError("baseProperty is required")
    base = parse_property(payload["baseProperty"])
    comps, errors = parse_properties(_comparables(payload))
    if errors:
        raise ApiError("invalid comparables", errors=[e.as_dict() for e in errors])
    return base, comps


@bp.route("/api/matches", methods=["POST"])
def matches():  # type: ignore[no-untyped-def]
    payload = _payload()
    base, comps = _matching_inputs(payload)
    results = compute_matches(base, comps, _scoring_config(payload))
    return jsonify({"matches": [r.as_dict() for r in results]})


@bp.route("/api/pricing", methods=["POST"])
def pricing():  # type: ignore[no-untyped-def]
    payload = _payload()
    stats = compute_pricing_stats(_comparables(payload))
    price_range = suggest_price_range(stats, payload.get("size"))
    return jsonify({
        "pricing": stats.as_dict() if stats else None,
        "priceRange": price_range.as_dict() if price_range else None,
    })


@bp.route("/api/evaluate", methods=["POST"])
def evaluate_route():  # type: ignore[no-untyped-def]
    payload = _payload()
    base, comps = _matching_inputs(payload)
    result = evaluate(base, comps, _scoring_config(payload))
    body = result.as_dict()
    body["ranking"] = [r.listing_name for r in rank_matches(result.matches)]
    return jsonify(body)


@bp.route("/api/matches/export", methods=["POST"])
def export_matches_route():  # type: ignore[no-untyped-def]
    fmt = request.args.get("fmt", "csv").lower()
    if fmt not in ("csv", "xlsx"):
        fmt = "csv"
    payload = _payload()
    base, comps = _matching_inputs(payload)
    result = evaluate(base, comps, _scoring_config(payload))
    fpath = os.path.abspath(
        export_matches(result.matches, result.pricing, out_dir=current_app.config["EXPORT_DIR"], fmt=fmt)
    )
    _delete_file_later(fpath, delay_seconds=120)
    return send_file(fpath, as_attachment=True, download_name=os.path.basename(fpath))


# Simple health endpoint for container orchestrators (K8s, ECS, etc.)
@bp.route("/health")
def health():  # type: ignore[no-untyped-def]
    return {"status": "ok"}
