"""Change Event Stream

Server-sent events of ledger changes for one account.
"""

from typing import AsyncIterator, Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from src.adapter.services.change_notifier import ChangeSubscription, InMemoryChangeFeed
from src.app.services.change_notifier import ChangeEntity, ChangeEvent
from src.depends import get_change_feed
from src.api.error import ClientError, VALIDATION_ERROR
from libs.result import Error

router = APIRouter(prefix="/events", tags=["Events"])

KEEPALIVE_SECONDS = 15.0


def format_sse(event: ChangeEvent) -> str:
    return f"event: {event.entity}\ndata: {event.model_dump_json()}\n\n"


async def stream_events(
    request: Request,
    subscription: ChangeSubscription,
    max_events: Optional[int],
    keepalive_seconds: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    sent = 0
    try:
        while max_events is None or sent < max_events:
            event = await subscription.get(timeout=keepalive_seconds)
            if event is None:
                if await request.is_disconnected():
                    break
                yield ": keep-alive\n\n"
                continue
            yield format_sse(event)
            sent += 1
    finally:
        subscription.close()


@router.get("/{account_id}")
async def stream_account_events(
    account_id: str,
    request: Request,
    entities: Optional[str] = Query(
        default=None,
        description="Comma-separated entity filter, e.g. wallet,transaction",
    ),
    max_events: Optional[int] = Query(default=None, ge=1, description="Close after this many events"),
    feed: InMemoryChangeFeed = Depends(get_change_feed),
):
    """
    Stream change events for an account as `text/event-stream`.

    Delivery is best effort; reload the entity from its endpoint to recover
    the authoritative state.
    """
    wanted = None
    if entities:
        wanted = {e.strip() for e in entities.split(",") if e.strip()}
        unknown = wanted - ChangeEntity.ALL
        if unknown:
            raise ClientError(
                Error(
                    code=VALIDATION_ERROR,
                    message="Unknown entity filter",
                    reason=", ".join(sorted(unknown)),
                )
            )

    subscription = feed.subscribe(account_id, wanted)
    return StreamingResponse(
        stream_events(request, subscription, max_events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
