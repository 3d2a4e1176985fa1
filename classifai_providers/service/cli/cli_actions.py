"""CLI action handlers.

Each handler takes the parsed arguments and a wired container, prints one
JSON document to stdout, and returns the process exit code:

- ``0`` on success
- ``1`` when the operation returned a ``Failure`` (printed as JSON)
- ``2`` for usage errors (unknown feature, malformed ``--set``/``--data``)

Handlers never raise for ``Failure`` values; those are rendered like any
other result.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Mapping

from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.result import Failure, Result
from ...di import ProvidersContainer
from ..app_parts.app_core import mask_settings

_logger = get_logger("classifai.cli")


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _usage_error(message: str) -> int:
    print(json.dumps({"error": message}), file=sys.stderr)
    return 2


def _emit(result: Result[Any], event: str, ctx: LogContext) -> int:
    if isinstance(result, Failure):
        normalized_log_event(_logger, event, ctx, phase="cli", outcome="error", error_kind=result.kind.value)
        _print(result.to_dict())
        return 1
    normalized_log_event(_logger, event, ctx, phase="cli", outcome="ok")
    _print({"ok": True, "result": result.value})
    return 0


def parse_value(text: str) -> Any:
    """JSON-decode ``text`` when possible (numbers, objects, booleans), else keep the string."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Turn ``["enabled=1", "watson_nlu.username=apikey"]`` into a raw settings dict.

    Raises
    ------
    ValueError
        When an assignment has no ``=``.
    """
    raw: Dict[str, Any] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"expected KEY=VALUE, got '{item}'")
        head, dot, tail = key.strip().partition(".")
        if dot:
            block = raw.setdefault(head, {})
            block[tail] = parse_value(value)
        else:
            raw[head] = parse_value(value)
    return raw


def _merge_raw(base: Dict[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key].update(value)
        else:
            base[key] = value
    return base


def handle_features(args: argparse.Namespace, container: ProvidersContainer) -> int:
    rows = []
    for feature in container.features.values():
        settings = feature.get_settings()
        rows.append(
            {
                "id": feature.id,
                "provider": settings.get("provider"),
                "providers": list(feature.supported_provider_ids),
                "state": feature.state(settings).value,
            }
        )
    _print({"ok": True, "features": rows})
    return 0


def handle_settings(args: argparse.Namespace, container: ProvidersContainer) -> int:
    """``settings show FEATURE`` or ``settings set FEATURE [--data JSON] [--set K=V ...]``."""
    if args.feature not in container.features:
        return _usage_error(f"unknown feature '{args.feature}'")
    feature = container.feature(args.feature)
    if args.settings_cmd == "show":
        _print({"ok": True, "settings": mask_settings(container, feature.get_settings())})
        return 0

    try:
        raw: Dict[str, Any] = json.loads(args.data) if args.data else {}
        if not isinstance(raw, dict):
            raise ValueError("--data must be a JSON object")
        raw = _merge_raw(raw, parse_assignments(args.assignments))
    except ValueError as exc:
        return _usage_error(str(exc))

    result = feature.save_settings(raw, reconnect=args.reconnect)
    if isinstance(result, Failure):
        return _emit(result, "cli.settings", LogContext(feature=feature.id))
    payload = dict(result.value)
    payload["settings"] = mask_settings(container, payload["settings"])
    normalized_log_event(_logger, "cli.settings", LogContext(feature=feature.id), phase="cli", outcome="ok")
    _print({"ok": True, **payload})
    return 0


def handle_toggle(args: argparse.Namespace, container: ProvidersContainer) -> int:
    if args.feature not in container.features:
        return _usage_error(f"unknown feature '{args.feature}'")
    result = container.feature(args.feature).set_enabled(args.cmd == "enable")
    return _emit(result, f"cli.{args.cmd}", LogContext(feature=args.feature))


def handle_reset(args: argparse.Namespace, container: ProvidersContainer) -> int:
    if args.feature not in container.features:
        return _usage_error(f"unknown feature '{args.feature}'")
    result = container.feature(args.feature).reset_settings()
    if isinstance(result, Failure):
        return _emit(result, "cli.reset", LogContext(feature=args.feature))
    _print({"ok": True, "settings": mask_settings(container, result.value)})
    return 0


def handle_dispatch(args: argparse.Namespace, container: ProvidersContainer) -> int:
    """Run ``dispatch FEATURE ITEM``; unknown features are reported by the dispatcher."""
    try:
        extra = parse_assignments(args.extra)
    except ValueError as exc:
        return _usage_error(str(exc))
    result = container.dispatcher.dispatch(args.feature, args.item, actor=args.actor, args=extra)
    return _emit(result, "cli.dispatch", LogContext(feature=args.feature, item_id=args.item))


def handle_debug(args: argparse.Namespace, container: ProvidersContainer) -> int:
    if args.feature not in container.features:
        return _usage_error(f"unknown feature '{args.feature}'")
    _print({"ok": True, "debug": container.feature(args.feature).debug_information()})
    return 0


HANDLERS = {
    "features": handle_features,
    "settings": handle_settings,
    "enable": handle_toggle,
    "disable": handle_toggle,
    "reset": handle_reset,
    "dispatch": handle_dispatch,
    "debug": handle_debug,
}


__all__ = [
    "HANDLERS",
    "handle_debug",
    "handle_dispatch",
    "handle_features",
    "handle_reset",
    "handle_settings",
    "handle_toggle",
    "parse_assignments",
    "parse_value",
]
