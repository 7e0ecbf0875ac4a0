import warnings
from types import MappingProxyType
from typing import Any, Callable, Optional

import structlog


def get_logging_user_id(user: Any) -> str:
    """
    Return a consistent identifier for logging purposes.

    Args:
        user (Any): A Django user object (possibly anonymous).

    Returns:
        user_id (str): User's ID or "anonymous" if unauthenticated or the user
            has no ID.
    """
    if not getattr(user, "is_authenticated", False):
        return "anonymous"

    user_id = getattr(user, "id", None)
    if user_id is None:
        return "anonymous"

    return str(user_id)


def _entity_type(entity: Any) -> Optional[str]:
    meta = getattr(entity, "_meta", None)
    if meta is not None:
        return meta.label_lower
    return getattr(entity, "entity_type", None)


# Default global registry for semantic context extractors
_DEFAULT_EXTRACTORS: dict[str, Callable[[Any], dict[str, Any]]] = {}


def _register_default_extractor(
    context_key: str, extractor_function: Callable[[Any], dict[str, Any]]
):
    _DEFAULT_EXTRACTORS[context_key] = extractor_function


_register_default_extractor("user", lambda user: {"user_id": get_logging_user_id(user)})

_register_default_extractor(
    "media",
    lambda media: {
        "media_id": getattr(media, "pk", None),
        "media_source": getattr(media, "source", None),
        "remote_id": getattr(media, "remote_id", None) or None,
    },
)

_register_default_extractor(
    "entity",
    lambda entity: {
        "entity_type": _entity_type(entity),
        "entity_id": getattr(entity, "pk", None),
    },
)

# Freeze default extractors to prevent mutation
_DEFAULT_EXTRACTORS = MappingProxyType(_DEFAULT_EXTRACTORS)


class MediaHubLogger:
    """
    A structured logging wrapper around structlog that enforces consistent
    logging conventions across the site.

    Every log call requires a human-readable ``message`` and a machine-readable
    ``event_code``. Warnings and errors additionally require ``reason`` and
    ``reason_code`` so failures can be grouped and searched.

    Objects passed under a known context key are expanded into flat fields:

    - ``user`` -> ``user_id``
    - ``media`` -> ``media_id``, ``media_source``, ``remote_id``
    - ``entity`` -> ``entity_type``, ``entity_id``

    Explicit values (e.g. ``media_id=...``) override extracted ones and fields
    whose value is ``None`` are omitted.

    Usage:
        ```python
        structured_logger = MediaHubLogger.get_logger(__name__)
        structured_logger.info(
            "Uploaded media to the DAM.",
            event_code="dam_upload_accepted",
            media=media,
            remote_id=handle.remote_id,
        )
        ```

    A logger can be bound to context which is then included in every call:
        ```python
        media_logger = structured_logger.bind(media=media)
        media_logger.info("Polling started.", event_code="dam_poll_started")
        ```
    """

    def __init__(self, logger, context: Optional[dict[str, Any]] = None):
        self._logger = logger
        self._context = context or {}
        self._extractors = _DEFAULT_EXTRACTORS.copy()

    @classmethod
    def get_logger(cls, name: str) -> "MediaHubLogger":
        """
        Create a MediaHubLogger for the given module name.

        The underlying structlog logger is named ``structlog.<name>`` so the
        ``structlog`` entry of the LOGGING setting routes it.
        """
        return cls(structlog.get_logger(f"structlog.{name}"))

    def register_extractor(
        self, key: str, extractor: Callable[[Any], dict[str, Any]]
    ) -> None:
        """
        Register a custom context extractor for this logger instance only.

        Args:
            key (str): The context key to extract (e.g., "custom_object").
            extractor (Callable): A function that returns a dict of fields to log.
        """
        self._extractors[key] = extractor
        if key in _DEFAULT_EXTRACTORS:
            warnings.warn(
                f"Extractor for '{key}' registered on this logger only; other "
                f"loggers keep using the default implementation.",
                UserWarning,
                stacklevel=2,
            )

    def unregister_extractor(self, key: str) -> None:
        self._extractors.pop(key, None)

    def log(
        self,
        level: str,
        message: str,
        *,
        event_code: str,
        reason: Optional[str] = None,
        reason_code: Optional[str] = None,
        **context: Any,
    ) -> None:
        """
        Emit a structured log entry. Use the level methods instead of calling
        this directly.

        Raises:
            ValueError: If required fields are missing for the given log level.
        """
        if not message:
            raise ValueError("Log message is required.")
        if not event_code:
            raise ValueError("Structured logs must include an 'event_code' field.")
        if level in ("warning", "error") and (not reason or not reason_code):
            raise ValueError(
                "Warnings and errors must include both 'reason' and 'reason_code'."
            )

        context_data = {"event_code": event_code}
        if reason:
            context_data["reason"] = reason
        if reason_code:
            context_data["reason_code"] = reason_code

        bound_context = self._context

        for context_key, extractor_function in self._extractors.items():
            context_object = context.pop(context_key, bound_context.get(context_key))
            if context_object:
                extracted_fields = extractor_function(context_object)
                for key, value in extracted_fields.items():
                    if value is not None:
                        context_data.setdefault(key, value)

        for key, value in bound_context.items():
            if key not in self._extractors and key not in context and value is not None:
                context_data[key] = value

        # Explicit values win over extracted and bound ones
        for key, value in context.items():
            if value is not None:
                context_data[key] = value

        getattr(self._logger, level)(message, **context_data)

    def debug(self, message: str, *, event_code: str, **kwargs):
        self.log("debug", message, event_code=event_code, **kwargs)

    def info(self, message: str, *, event_code: str, **kwargs):
        self.log("info", message, event_code=event_code, **kwargs)

    def warning(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        self.log(
            "warning",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def error(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        self.log(
            "error",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def exception(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ):
        """Emit an error-level log including the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self.error(
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def bind(self, **kwargs: Any) -> "MediaHubLogger":
        """
        Return a new MediaHubLogger with additional context permanently bound.

        Bound objects with registered extractors are expanded at log time.
        """
        new_context = self._context.copy()
        new_context.update(kwargs)
        return MediaHubLogger(self._logger, context=new_context)
