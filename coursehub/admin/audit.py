from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.auth.auth_permissions import UserContext


async def log_audit(
    db: AsyncIOMotorDatabase,
    actor: UserContext,
    action: str,
    target_type: str,
    target_id: str,
    metadata: Optional[dict] = None
):
    """
    Record an admin mutation for auditability

    Args:
        actor: UserContext of the admin
        action: Action performed (e.g., 'create_course', 'delete_category')
        target_type: Resource type ('course' or 'category')
        target_id: ID of the resource
        metadata: Additional context (optional)
    """
    await db.audit_logs.insert_one({
        "actor_user_id": actor.user_id,
        "actor_email": actor.email,
        "action": action,
        "target_type": target_type,
        "target_id": str(target_id),
        "metadata": metadata or {},
        "timestamp": datetime.utcnow(),
    })


async def get_audit_trail(
    db: AsyncIOMotorDatabase,
    target_type: str = None,
    target_id: str = None,
    limit: int = 100
):
    """Most recent audit entries, optionally narrowed to one resource"""
    query = {}
    if target_type:
        query["target_type"] = target_type
    if target_id:
        query["target_id"] = target_id

    cursor = db.audit_logs.find(query).sort("timestamp", -1).limit(limit)
    logs = await cursor.to_list(length=limit)

    for log in logs:
        log.pop("_id", None)

    return logs
