"""
Event and initiative endpoints. Reads are public; writes are admin-only.
"""

from typing import List, Optional

from fastapi import APIRouter, Request, status

from thinktank.api.deps import AdminCaller, CurrentCaller, DbSession, get_client_ip
from thinktank.kernel.models.base import utcnow
from thinktank.kernel.models.event import InitiativeCategory
from thinktank.schemas.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    InitiativeCreate,
    InitiativeResponse,
    InitiativeUpdate,
)
from thinktank.services.event_service import EventService, InitiativeService

router = APIRouter()


def _event_list(events) -> List[EventResponse]:
    now = utcnow()
    return [EventResponse.from_event(e, now) for e in events]


@router.get("", response_model=List[EventResponse])
async def list_events(caller: CurrentCaller, db: DbSession):
    """All events in display order."""
    items, _ = await EventService(db).list(caller, limit=500)
    return _event_list(items)


@router.get("/upcoming", response_model=List[EventResponse])
async def upcoming_events(db: DbSession):
    return _event_list(await EventService(db).upcoming())


@router.get("/past", response_model=List[EventResponse])
async def past_events(db: DbSession):
    return _event_list(await EventService(db).past())


@router.get("/initiatives", response_model=List[InitiativeResponse])
async def list_initiatives(
    caller: CurrentCaller,
    db: DbSession,
    category: Optional[InitiativeCategory] = None,
):
    items = await InitiativeService(db).by_category(caller, category.value if category else None)
    return [InitiativeResponse.model_validate(i) for i in items]


@router.get("/{slug}", response_model=EventResponse)
async def get_event(slug: str, db: DbSession):
    event = await EventService(db).get_by_slug(slug)
    return EventResponse.from_event(event, utcnow())


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(request: Request, data: EventCreate, caller: AdminCaller, db: DbSession):
    event = await EventService(db).create(
        caller, data.model_dump(mode="python"), ip_address=get_client_ip(request)
    )
    return EventResponse.from_event(event, utcnow())


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    request: Request,
    event_id: int,
    data: EventUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    event = await EventService(db).update(
        caller, event_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return EventResponse.from_event(event, utcnow())


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(request: Request, event_id: int, caller: AdminCaller, db: DbSession):
    await EventService(db).delete(caller, event_id, ip_address=get_client_ip(request))


@router.post(
    "/initiatives",
    response_model=InitiativeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_initiative(
    request: Request,
    data: InitiativeCreate,
    caller: AdminCaller,
    db: DbSession,
):
    initiative = await InitiativeService(db).create(
        caller, data.model_dump(), ip_address=get_client_ip(request)
    )
    return InitiativeResponse.model_validate(initiative)


@router.patch("/initiatives/{initiative_id}", response_model=InitiativeResponse)
async def update_initiative(
    request: Request,
    initiative_id: int,
    data: InitiativeUpdate,
    caller: AdminCaller,
    db: DbSession,
):
    initiative = await InitiativeService(db).update(
        caller, initiative_id, data.model_dump(exclude_unset=True), ip_address=get_client_ip(request)
    )
    return InitiativeResponse.model_validate(initiative)


@router.delete("/initiatives/{initiative_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_initiative(
    request: Request,
    initiative_id: int,
    caller: AdminCaller,
    db: DbSession,
):
    await InitiativeService(db).delete(caller, initiative_id, ip_address=get_client_ip(request))
