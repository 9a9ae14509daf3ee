"""
Audit store: append-only record of who changed what.

Entries are added to the caller's session so they commit (or roll back)
together with the change they describe.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.kernel.models.audit_log import AuditAction, AuditLog


class AuditStore:
    """
    Service for writing and reading the audit log.

    Usage:
        audit = AuditStore(session)
        await audit.log(
            action=AuditAction.CONTENT_STATUS_CHANGED,
            entity_type="publication",
            entity_id=pub.id,
            actor_id=caller.profile_id,
            payload={"from_status": "pending_review", "to_status": "published"},
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: Any,
        actor_id: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        entry = AuditLog(
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_id=actor_id,
            payload=self._serialize_payload(payload or {}),
            ip_address=ip_address,
        )
        self.session.add(entry)
        return entry

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: Any,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AuditLog]:
        """Entries for one record, newest first."""
        query = (
            select(AuditLog)
            .where(
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == str(entity_id),
            )
            .order_by(desc(AuditLog.created_at), desc(AuditLog.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_recent(
        self,
        action: Optional[AuditAction] = None,
        actor_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[AuditLog], int]:
        """Recent entries across the site, with the total matching count."""
        conditions = []
        if action:
            conditions.append(AuditLog.action == action)
        if actor_id:
            conditions.append(AuditLog.actor_id == actor_id)

        total = await self.session.scalar(
            select(func.count(AuditLog.id)).where(*conditions)
        )
        query = (
            select(AuditLog)
            .where(*conditions)
            .order_by(desc(AuditLog.created_at), desc(AuditLog.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total or 0

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert payload values to JSON-serializable types."""
        result: Dict[str, Any] = {}
        for key, value in payload.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif hasattr(value, "value"):
                result[key] = value.value
            elif isinstance(value, dict):
                result[key] = self._serialize_payload(value)
            else:
                result[key] = value
        return result
