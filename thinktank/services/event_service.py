"""
Events and initiatives.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select

from thinktank.content.repository import ListFilter
from thinktank.kernel.errors import NotFoundError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.base import utcnow
from thinktank.kernel.models.event import (
    Event,
    EventStatus,
    EventType,
    Initiative,
    InitiativeCategory,
)
from thinktank.services.admin_records import AdminRecordService


class EventService(AdminRecordService):
    """Event calendar. Listing order is ``display_order`` unless stated."""

    model = Event
    entity_type = "event"
    label = "Event"
    plain_text_fields = ("title", "location")
    rich_text_fields = ("description",)
    enum_fields = {"type": EventType, "status": EventStatus}

    async def upcoming(self, now: Optional[datetime] = None) -> List[Event]:
        """Events still marked upcoming that have not started, soonest first."""
        now = now or utcnow()
        result = await self.session.execute(
            select(Event)
            .where(Event.status == EventStatus.UPCOMING.value, Event.start_date >= now)
            .order_by(Event.start_date.asc(), Event.id.asc())
        )
        return list(result.scalars().all())

    async def past(self, now: Optional[datetime] = None) -> List[Event]:
        """Events that have started, most recent first."""
        now = now or utcnow()
        result = await self.session.execute(
            select(Event)
            .where(Event.start_date < now)
            .order_by(Event.start_date.desc(), Event.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Event:
        event = await self.repository.get_by_slug(slug)
        if event is None:
            raise NotFoundError("Event not found")
        return event


class InitiativeService(AdminRecordService):
    model = Initiative
    entity_type = "initiative"
    label = "Initiative"
    plain_text_fields = ("title", "icon_name")
    rich_text_fields = ("description",)
    enum_fields = {"category": InitiativeCategory}

    async def by_category(self, caller: Caller, category: Optional[str] = None) -> List[Initiative]:
        filters = ListFilter()
        if category is not None:
            filters.category = self._prepare({"category": category})["category"]
        items, _ = await self.list(caller, filters)
        return items
