"""
Service / facade layer: the persistence gateway.

This module is free of SQL. It runs the validation pipeline from
`validation.py` and calls an `EventStore` for the actual reads and writes.
All write paths go through `EventService.create_event` so every stored row
has passed the same checks.

Contract: `create_event`, `get_event` and `list_events` never raise. They
return `errors.Result` and log the failure. Writes are not retried; a
failed create has to be resubmitted by the caller.
"""

import logging
from typing import Any, Mapping
from uuid import UUID

from errors import NotFoundError, Result, StorageError, ValidationError
from models import Event, EventDraft
from repo_events import EventStore
from validation import prepare_event

logger = logging.getLogger(__name__)


def _loggable(payload: Any) -> Any:
    if isinstance(payload, EventDraft):
        return payload.model_dump(mode="json", by_alias=True)
    return payload


def _storage_error(exc: Exception) -> StorageError:
    return StorageError(str(exc) or type(exc).__name__, cause=exc)


class EventService:
    """Validation + normalization in front of an `EventStore`.

    Example usage:
        svc = EventService(EventRepo())
        result = svc.create_event({"name": "Launch Party", ...})
        if result.success:
            print(result.data.id)
    """

    def __init__(self, repo: EventStore):
        self.repo = repo

    def create_event(self, draft: EventDraft | Mapping[str, Any]) -> Result[Event]:
        """Validate, normalize and persist one event."""

        try:
            new_event = prepare_event(draft)
        except ValidationError as e:
            logger.warning(
                "Event rejected (%s): %s; payload=%r",
                type(e).__name__, e.message, _loggable(draft),
            )
            return Result.fail(e)

        try:
            event = self.repo.insert_event(new_event)
        except Exception as e:
            logger.error(
                "Creating event failed (%s): %s; raw=%r normalized=%r",
                type(e).__name__, e, _loggable(draft),
                new_event.model_dump(mode="json", by_alias=True),
                exc_info=True,
            )
            return Result.fail(_storage_error(e))

        logger.info("Created event %s", event.id)
        return Result.ok(event)

    def get_event(self, event_id: str | UUID) -> Result[Event]:
        """Look up one event. Malformed ids are reported as not found."""

        try:
            key = event_id if isinstance(event_id, UUID) else UUID(str(event_id))
        except ValueError:
            logger.info("Event lookup with malformed id %r", event_id)
            return Result.fail(NotFoundError(str(event_id)))

        try:
            event = self.repo.fetch_event(key)
        except Exception as e:
            logger.error(
                "Fetching event %s failed (%s): %s", key, type(e).__name__, e,
                exc_info=True,
            )
            return Result.fail(_storage_error(e))

        if event is None:
            logger.info("Event %s not found", key)
            return Result.fail(NotFoundError(str(key)))
        return Result.ok(event)

    def list_events(self) -> Result[list[Event]]:
        """All events, oldest first."""

        try:
            return Result.ok(self.repo.fetch_events())
        except Exception as e:
            logger.error(
                "Listing events failed (%s): %s", type(e).__name__, e,
                exc_info=True,
            )
            return Result.fail(_storage_error(e))

    def health_check(self) -> None:
        """Perform a lightweight DB ping via the repository."""

        self.repo.ping()
