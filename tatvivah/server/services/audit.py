"""
Audit Service.

Records administrative actions. ``log_action`` only flushes: the audit row
commits together with the change it describes.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.database.entities.audit_logs import AuditEntityType, AuditLog
from tatvivah.core.database.repositories import AuditLogRepository
from tatvivah.core.logging_config import get_logger

logger = get_logger(__name__)


def _audit_log(entry: AuditLog) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "actorId": entry.actor_id,
        "action": entry.action,
        "entityType": entry.entity_type,
        "entityId": entry.entity_id,
        "metadata": entry.meta,
        "createdAt": entry.created_at,
    }


class AuditService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.audit_logs = AuditLogRepository(session)

    async def log_action(
        self,
        actor_id: str,
        action: str,
        entity_type: AuditEntityType,
        entity_id: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        entry = await self.audit_logs.create(
            AuditLog(
                actor_id=actor_id,
                action=action,
                entity_type=entity_type.value,
                entity_id=entity_id,
                meta=metadata,
            )
        )
        logger.info(f"Audit: {actor_id} {action} {entity_type.value}:{entity_id}")
        return entry

    async def list_audit_logs(
        self,
        entity_type: Optional[AuditEntityType] = None,
        entity_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        entries = await self.audit_logs.search(
            entity_type=entity_type.value if entity_type else None,
            entity_id=entity_id,
            actor_id=actor_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return {"auditLogs": [_audit_log(e) for e in entries]}

    async def get_entity_history(self, entity_type: AuditEntityType, entity_id: str) -> Dict[str, Any]:
        entries = await self.audit_logs.find_by_entity(entity_type.value, entity_id)
        return {"auditLogs": [_audit_log(e) for e in entries]}
