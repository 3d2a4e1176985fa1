"""Dispatcher: route an item-level invocation to a feature.

Resolution order, each stage short-circuiting with a ``Failure``:

1. resolve the feature id                 -> ``configuration_error``
2. feature enabled                         -> ``not_enabled``
3. item type/status in ``supported_scope`` -> ``not_enabled``
4. ``Authorizer.can_perform``              -> ``not_authorized``
5. load item content/title/file path
6. ``Feature.run``

No stage after a failing one runs, so a rejected call never touches a
provider. Collaborator exceptions (unknown item, store errors) are converted
to ``Failure`` here; nothing escapes ``dispatch``.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from ..base.errors import ErrorKind
from ..base.interfaces_parts.authorizer import Authorizer
from ..base.interfaces_parts.item_metadata import ItemMetadata
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.result import Failure, Result
from ..features.base import Feature


class Dispatcher:
    """Routes ``dispatch(feature_id, item_id, ...)`` calls to features."""

    def __init__(self, features: Iterable[Feature], authorizer: Authorizer, items: ItemMetadata) -> None:
        self._features: Mapping[str, Feature] = MappingProxyType({f.id: f for f in features})
        self._authorizer = authorizer
        self._items = items
        self._logger = get_logger("classifai.dispatch")

    @property
    def features(self) -> Mapping[str, Feature]:
        return self._features

    def dispatch(
        self,
        feature_id: str,
        item_id: str,
        actor: Any = None,
        args: Optional[Mapping[str, Any]] = None,
    ) -> Result[Any]:
        ctx = LogContext(feature=feature_id, item_id=str(item_id))
        try:
            result = self._dispatch(feature_id, str(item_id), actor, dict(args or {}), ctx)
        except Exception as exc:  # boundary: collaborator failures become Failure
            result = Failure.from_exception(exc, default=ErrorKind.INTERNAL, feature=feature_id)
        normalized_log_event(
            self._logger, "dispatch.result", ctx, phase="dispatch",
            outcome="ok" if result.ok else "rejected",
            error_kind=None if result.ok else result.kind.value,
        )
        return result

    def _dispatch(
        self, feature_id: str, item_id: str, actor: Any, args: Dict[str, Any], ctx: LogContext
    ) -> Result[Any]:
        feature = self._features.get(feature_id)
        if feature is None:
            return Failure(ErrorKind.CONFIGURATION, f"unknown feature '{feature_id}'", {"feature": feature_id})

        settings = feature.get_settings()
        if not feature.is_enabled(settings):
            return Failure(ErrorKind.NOT_ENABLED, f"feature '{feature_id}' is disabled", {"feature": feature_id})

        try:
            item_type = self._items.get_type(item_id)
            status = self._items.get_status(item_id)
        except KeyError:
            return Failure(ErrorKind.VALIDATION, f"unknown item '{item_id}'", {"feature": feature_id, "item_id": item_id})

        scope = feature.supported_scope(settings)
        if item_type not in scope.post_types:
            return Failure(
                ErrorKind.NOT_ENABLED,
                f"item type '{item_type}' is not enabled for '{feature_id}'",
                {"feature": feature_id, "item_id": item_id, "type": item_type},
            )
        if status not in scope.statuses:
            return Failure(
                ErrorKind.NOT_ENABLED,
                f"item status '{status}' is not enabled for '{feature_id}'",
                {"feature": feature_id, "item_id": item_id, "status": status},
            )

        if not self._authorizer.can_perform(actor, item_id, feature_id):
            return Failure(
                ErrorKind.NOT_AUTHORIZED,
                f"not allowed to run '{feature_id}' on '{item_id}'",
                {"feature": feature_id, "item_id": item_id},
            )

        normalized_log_event(self._logger, "dispatch.run", ctx, phase="dispatch", outcome="accepted")
        call_args = dict(args)
        call_args.update(
            item_id=item_id,
            content=self._items.get_content(item_id),
            title=self._items.get_title(item_id),
            file_path=self._items.get_file_path(item_id),
        )
        return feature.run(call_args)


__all__ = ["Dispatcher"]
