from datetime import datetime
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from config.constants import PROFILE_FIELDS
from utils.errors import DuplicateEmail, NotFound
from utils.validators import normalize_email


async def find_by_email(db, email: str):
    return await db.users.find_one({"email": normalize_email(email)})


async def find_by_id(db, user_id):
    return await db.users.find_one({"_id": user_id})


async def create_user(db, user: dict) -> dict:
    """
    Insert a new identity.
    The lookup only gives a friendly early error; the unique email
    index is what actually rejects concurrent duplicates.
    """
    user = dict(user)
    user["email"] = normalize_email(user["email"])

    if await find_by_email(db, user["email"]):
        raise DuplicateEmail()

    now = datetime.utcnow()
    user.setdefault("bio", None)
    user.setdefault("profile_picture", None)
    user.update({
        "average_rating": 0,
        "total_reviews": 0,
        "total_listings": 0,
        "created_at": now,
        "updated_at": now,
    })

    try:
        result = await db.users.insert_one(user)
    except DuplicateKeyError:
        raise DuplicateEmail()

    user["_id"] = result.inserted_id
    return user


async def update_profile(db, user_id, fields: dict) -> dict:
    updates = {
        k: v for k, v in fields.items()
        if k in PROFILE_FIELDS and v is not None
    }
    updates["updated_at"] = datetime.utcnow()

    user = await db.users.find_one_and_update(
        {"_id": user_id},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not user:
        raise NotFound("User not found")
    return user


async def increment_listing_count(db, user_id, delta: int) -> None:
    await db.users.update_one(
        {"_id": user_id},
        {
            "$inc": {"total_listings": delta},
            "$set": {"updated_at": datetime.utcnow()},
        },
    )


async def set_rating_aggregate(
    db,
    user_id,
    average: float,
    count: int,
    *,
    force: bool = False,
) -> bool:
    """
    Store a recomputed (average, count) pair on the seller.

    Reviews are insert-only, so a snapshot with more reviews always
    supersedes one with fewer. Unless forced, the write only lands when
    the stored count is not ahead of ours; a slow recompute can never
    overwrite a fresher one. Returns True when the document was written.
    """
    query = {"_id": user_id}
    if not force:
        query["$or"] = [
            {"total_reviews": {"$exists": False}},
            {"total_reviews": {"$lte": count}},
        ]

    result = await db.users.update_one(
        query,
        {
            "$set": {
                "average_rating": average,
                "total_reviews": count,
                "rating_updated_at": datetime.utcnow(),
            }
        },
    )
    return result.matched_count == 1
