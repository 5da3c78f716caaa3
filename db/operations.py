"""Database operation helpers.

Storage errors are logged and re-raised as :class:`PersistenceError`; no
operation is retried here, retry policy belongs to the caller.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

from beanie import PydanticObjectId
from bson import ObjectId
from pymongo.errors import PyMongoError

from core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def persistence_guard(operation_name: str) -> Iterator[None]:
    """Translate driver errors raised inside the block into PersistenceError."""
    try:
        yield
    except PyMongoError as e:
        logger.exception("Database operation '%s' failed", operation_name)
        msg = f"Database error during {operation_name}"
        raise PersistenceError(msg, {"operation": operation_name}) from e


def parse_object_id(value: str | None) -> PydanticObjectId | None:
    """Return an ObjectId for a well-formed id string, else None."""
    if value is None:
        return None
    text = str(value).strip()
    if not ObjectId.is_valid(text):
        return None
    return PydanticObjectId(text)
