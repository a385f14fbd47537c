"""
Plumbing shared by the data-access services.

- `mutation` wraps a write: on success it invalidates the queries declared
  for the entity and raises a success toast; on failure it raises a
  destructive toast with the backend message and re-raises. Nothing is
  retried and the cache is left alone on failure.
- `commit` turns store failures into RemoteError after rolling back.
- `coerce_payload` validates a payload against its schema and strips the
  fields a caller may never set (id, owner).
"""
import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.exceptions import DataAccessError, RemoteError
from app.services.notifications import toaster
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = ("id", "user_id", "created_at", "updated_at")

# Column attributes whose API name differs from the model attribute
RENAMED_FIELDS = {"metadata": "extra_data"}

ToastMessage = Union[Tuple[str, str], Callable[[Any], Tuple[str, str]], None]


def serialize(schema: Type[BaseModel], obj: Any) -> Dict[str, Any]:
    """ORM row -> JSON-compatible dict, the shape every read returns and caches."""
    return schema.model_validate(obj).model_dump(mode="json")


def coerce_payload(schema: Type[BaseModel], payload: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate a create/update payload and return only the fields the caller set.

    Raises:
        RemoteError: payload rejected, with the validation message
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)

    payload = {k: v for k, v in dict(payload).items() if k not in PROTECTED_FIELDS}
    try:
        validated = schema.model_validate(payload)
    except ValidationError as e:
        raise RemoteError(str(e))

    data = validated.model_dump(exclude_unset=True)
    return {RENAMED_FIELDS.get(k, k): v for k, v in data.items()}


def apply_changes(row: Any, changes: Dict[str, Any]) -> None:
    for field, value in changes.items():
        setattr(row, field, value)


def commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        message = str(getattr(e, "orig", None) or e)
        logger.error(f"Store rejected write: {message}")
        raise RemoteError(message)


def run_query(query_fn: Callable[[], Any]) -> Any:
    """Run a read, mapping store failures to RemoteError."""
    try:
        return query_fn()
    except SQLAlchemyError as e:
        raise RemoteError(str(getattr(e, "orig", None) or e))


def _resolve_toast(message: ToastMessage, result: Any) -> Optional[Tuple[str, str]]:
    if message is None:
        return None
    if callable(message):
        return message(result)
    return message


def mutation(
    entity: str,
    success: ToastMessage = None,
    failure: Optional[Tuple[str, str]] = None,
    invalidate_ids: Callable[[Any], Iterable[Optional[str]]] = lambda result: [result["id"]],
):
    """
    Decorator for data-access writes. The wrapped function takes the
    SessionContext first.

    Args:
        entity: key into the invalidation table
        success: (title, description) or a callable building it from the result
        failure: (title, fallback description) for the destructive toast
        invalidate_ids: ids of the affected detail entries, from the result
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(ctx, *args, **kwargs):
            try:
                result = func(ctx, *args, **kwargs)
            except DataAccessError as e:
                title, fallback = failure or ("Something went wrong", "Please try again.")
                toaster.error(ctx.user_id, title, e, fallback)
                raise

            query_cache.invalidate(entity, ctx.user_id, invalidate_ids(result))

            toast = _resolve_toast(success, result)
            if toast:
                toaster.success(ctx.user_id, *toast)
            return result

        return wrapper

    return decorator
