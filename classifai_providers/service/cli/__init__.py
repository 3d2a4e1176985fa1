"""ClassifAI CLI (package entrypoint).

Wires argument parsing to action handlers in ``cli_actions``; performs no
feature logic directly.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

from ...base.collaborators import StaticItemCatalog
from ...base.errors import FeatureError
from ...base.logging import configure_logger
from ...base.result import Failure
from ...di import ProvidersContainer, build_container
from .cli_actions import HANDLERS
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None, container: Optional[ProvidersContainer] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.
    container: Optional[ProvidersContainer]
        Prewired container (tests); when ``None`` one is built from ``--db``
        and ``--items``.

    Returns
    -------
    int
        Process exit code (0 success, 1 failure result, 2 usage error).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.log_level:
        configure_logger(level=args.log_level)
    if container is None:
        items_file = getattr(args, "items", None)
        try:
            items = StaticItemCatalog.from_json_file(items_file) if items_file else None
        except (OSError, ValueError) as exc:
            print(json.dumps({"error": f"cannot read items file: {exc}"}), file=sys.stderr)
            return 2
        container = build_container(db_path=args.db, items=items)
    try:
        return HANDLERS[args.cmd](args, container)
    except FeatureError as exc:
        # Settings that cannot be read surface here rather than as a Result.
        print(json.dumps(Failure.from_exception(exc).to_dict(), indent=2, sort_keys=True, default=str))
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
