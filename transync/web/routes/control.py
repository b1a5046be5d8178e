"""Control surface API routes."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request

from transync.logger import get_logger
from transync.engine import TitleMount
from transync.surface import ContextNotInitialized

control_bp = Blueprint("control", __name__)
logger = get_logger(__name__)


def _session():
    return current_app.extensions["transync"]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _parse_items(raw: Any) -> Optional[List[Tuple[str, str]]]:
    """Accept [{"id": ..., "content": ...}, ...]; None when malformed."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        return None
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or "id" not in entry or not isinstance(entry.get("content"), str):
            return None
        items.append((str(entry["id"]), entry["content"]))
    return items


def _parse_ids(raw: Any) -> Optional[List[str]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        return None
    return [str(item_id) for item_id in raw]


def _parse_title_mounts(raw: Any) -> Optional[List[TitleMount]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        return None
    try:
        return [TitleMount(value) for value in raw]
    except ValueError:
        return None


@control_bp.errorhandler(ContextNotInitialized)
def handle_no_collection(e):
    return jsonify({"error": str(e), "code": "no_collection"}), 409


@control_bp.get("/state")
def get_state():
    return jsonify(_session().state())


@control_bp.post("/collection")
def open_collection():
    """Navigate to a new collection; all translation state of the old one is dropped."""
    data = _json_body()
    items = _parse_items(data.get("items"))
    mounted = _parse_ids(data.get("mounted"))
    title_mounts = _parse_title_mounts(data.get("title_mounts", [TitleMount.PRIMARY.value]))
    title = data.get("title")

    if items is None or mounted is None or title_mounts is None:
        return jsonify({"error": "Malformed collection payload", "code": "invalid_payload"}), 400
    if title is not None and not isinstance(title, str):
        return jsonify({"error": "Title must be a string", "code": "invalid_payload"}), 400

    state = _session().open_collection(items, title=title, title_mounts=title_mounts, mounted=mounted)
    return jsonify(state), 201


@control_bp.post("/items")
def append_items():
    items = _parse_items(_json_body().get("items"))
    if items is None:
        return jsonify({"error": "Malformed items payload", "code": "invalid_payload"}), 400
    return jsonify(_session().append_items(items))


@control_bp.post("/mounts")
def update_mounts():
    """Mount-change notification from the host view."""
    data = _json_body()
    mounted = _parse_ids(data.get("mounted"))
    unmounted = _parse_ids(data.get("unmounted"))
    title_mounted = _parse_title_mounts(data.get("title_mounted"))
    title_unmounted = _parse_title_mounts(data.get("title_unmounted"))

    if None in (mounted, unmounted, title_mounted, title_unmounted):
        return jsonify({"error": "Malformed mount payload", "code": "invalid_payload"}), 400

    return jsonify(_session().update_mounts(mounted, unmounted, title_mounted, title_unmounted))


@control_bp.post("/items/<item_id>/toggle")
def toggle_item(item_id: str):
    ok, state = _session().toggle_item(item_id)
    if not ok:
        return jsonify({"ok": False, "state": state}), 502
    return jsonify({"ok": True, "state": state})


@control_bp.post("/title/toggle")
def toggle_title():
    ok, state = _session().toggle_title()
    if not ok:
        return jsonify({"ok": False, "state": state}), 502
    return jsonify({"ok": True, "state": state})


@control_bp.post("/toggle-all")
def toggle_all():
    ok, state = _session().toggle_all()
    if not ok:
        return jsonify({"ok": False, "error": "A bulk run is already active", "state": state}), 409
    return jsonify({"ok": True, "state": state})


@control_bp.post("/language")
def select_language():
    code = _json_body().get("language")
    try:
        state = _session().select_language(code)
    except ValueError as e:
        logger.warning(f"Rejected target language {code!r}: {e}")
        return jsonify({"error": str(e), "code": "invalid_language"}), 400
    return jsonify(state)


@control_bp.post("/cancel")
def cancel_run():
    cancelled, state = _session().cancel_run()
    return jsonify({"cancelled": cancelled, "state": state})
