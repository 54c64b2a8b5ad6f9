import logging
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from coursehub.config import MONGO_URL, DATABASE_NAME

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGO_URL)
db = client[DATABASE_NAME]


def get_db_instance() -> AsyncIOMotorDatabase:
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()

# ==================== DATABASE INDEXES ====================

async def create_indexes(database: AsyncIOMotorDatabase):
    """Create MongoDB indexes for data integrity and catalog queries"""
    try:
        # One account per email
        await database.users.create_index("email", unique=True)

        # Catalog filters and sort keys
        await database.courses.create_index("category")
        await database.courses.create_index("level")
        await database.courses.create_index([("created_at", -1)])
        await database.courses.create_index([("enrolled_count", -1)])
        await database.courses.create_index([("price", 1)])
        await database.courses.create_index([("rating", -1)])

        await database.certificates.create_index("user")

        await database.audit_logs.create_index([("target_type", 1), ("target_id", 1)])
        await database.audit_logs.create_index("actor_user_id")

        logger.info("✅ Indexes created successfully")
    except Exception as e:
        logger.warning(f"⚠️  Index creation warning: {e}")

# ==================== SERIALIZATION HELPERS ====================

def serialize_mongo(value: Any) -> Any:
    """Turn ObjectIds (at any depth) into strings so documents are JSON safe"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize_mongo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_mongo(v) for v in value]
    return value


def serialize_many(docs: list[dict]) -> list[dict]:
    return [serialize_mongo(doc) for doc in docs]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id from a path or body; None when it is not a valid ObjectId"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    return datetime.utcnow()
