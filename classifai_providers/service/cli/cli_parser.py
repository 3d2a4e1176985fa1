"""CLI parser construction for classifai-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

COMMANDS = ("features", "settings", "enable", "disable", "reset", "dispatch", "debug")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``features``, ``settings show|set``, ``enable``,
        ``disable``, ``reset``, ``dispatch`` and ``debug`` subcommands.
    """
    p = argparse.ArgumentParser(prog="classifai-cli", description="Inspect and drive ClassifAI features")
    p.add_argument("--db", default=None, help="Settings database path (default: $CLASSIFAI_DB_PATH)")
    p.add_argument("--log-level", default=None, help="Logging level for stderr events")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("features", help="List features, active providers and states")

    # settings show|set
    p_settings = sub.add_parser("settings", help="Show or update feature settings")
    settings_sub = p_settings.add_subparsers(dest="settings_cmd", required=True)
    p_show = settings_sub.add_parser("show", help="Print merged settings (passwords masked)")
    p_show.add_argument("feature")
    p_set = settings_sub.add_parser("set", help="Sanitize and persist settings")
    p_set.add_argument("feature")
    p_set.add_argument("--data", default=None, help="JSON object of raw settings")
    p_set.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Single setting; use provider_id.key for provider fields (repeatable)",
    )
    p_set.add_argument("--reconnect", action="store_true", help="Force a connectivity check")

    for name, help_text in (("enable", "Enable a feature"), ("disable", "Disable a feature")):
        p_toggle = sub.add_parser(name, help=help_text)
        p_toggle.add_argument("feature")

    p_reset = sub.add_parser("reset", help="Restore default settings for a feature")
    p_reset.add_argument("feature")

    p_dispatch = sub.add_parser("dispatch", help="Run a feature against one item")
    p_dispatch.add_argument("feature")
    p_dispatch.add_argument("item")
    p_dispatch.add_argument("--items", default=None, help="JSON file of items keyed by id")
    p_dispatch.add_argument("--actor", default=None)
    p_dispatch.add_argument("--arg", dest="extra", action="append", default=[], metavar="KEY=VALUE")

    p_debug = sub.add_parser("debug", help="Print diagnostics for a feature")
    p_debug.add_argument("feature")

    return p
