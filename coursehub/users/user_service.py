from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from coursehub.auth.auth_permissions import UserContext
from coursehub.auth.auth_utils import hash_password, verify_password
from coursehub.database import serialize_mongo, to_object_id


def public_user(user: dict) -> dict:
    """Fields of a user that are safe to hand back to the client"""
    return {
        "_id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "is_admin": bool(user.get("is_admin", False)),
    }


async def get_user_record(db: AsyncIOMotorDatabase, user: UserContext) -> dict:
    """Load the caller's user document; 404 if the account is gone"""
    user_id = to_object_id(user.user_id)
    record = await db.users.find_one({"_id": user_id}) if user_id else None
    if not record:
        raise HTTPException(status_code=404, detail="User not found")
    return record


async def update_profile(db: AsyncIOMotorDatabase, user: UserContext, updates: dict) -> dict:
    record = await get_user_record(db, user)
    if not updates:
        record.pop("password", None)
        return serialize_mongo(record)

    email = updates.get("email")
    if email and email != record.get("email"):
        if await db.users.find_one({"email": email, "_id": {"$ne": record["_id"]}}):
            raise HTTPException(status_code=409, detail="Email already exists")

    try:
        updated = await db.users.find_one_and_update(
            {"_id": record["_id"]},
            {"$set": updates},
            projection={"password": 0},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Email already exists")

    return serialize_mongo(updated)


async def change_password(
    db: AsyncIOMotorDatabase,
    user: UserContext,
    current_password: str,
    new_password: str
) -> None:
    record = await get_user_record(db, user)
    if not verify_password(current_password, record.get("password")):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    await db.users.update_one(
        {"_id": record["_id"]},
        {"$set": {"password": hash_password(new_password)}}
    )
