from fastapi import APIRouter, Depends

from database import get_db
from utils.errors import NotFound
from utils.guards import parse_object_id
from utils.serializers import serialize_item, serialize_review, serialize_seller

router = APIRouter(prefix="/seller", tags=["Sellers"])


async def _get_seller(db, user_id: str) -> dict:
    seller = await db.users.find_one({"_id": parse_object_id(user_id, "user_id")})
    if not seller:
        raise NotFound("Seller not found")
    return seller


@router.get("/{user_id}")
async def seller_profile(user_id: str, db=Depends(get_db)):
    seller = await _get_seller(db, user_id)

    return {
        "success": True,
        "message": "Seller profile",
        "data": serialize_seller(seller),
    }


@router.get("/{user_id}/items")
async def seller_items(user_id: str, db=Depends(get_db)):
    seller = await _get_seller(db, user_id)

    cursor = db.items.find({"owner_id": seller["_id"]}, sort=[("created_at", -1)])
    items = [serialize_item(i) async for i in cursor]

    return {
        "success": True,
        "message": "Seller items",
        "count": len(items),
        "data": items,
    }


@router.get("/{user_id}/reviews")
async def seller_reviews(user_id: str, db=Depends(get_db)):
    seller = await _get_seller(db, user_id)

    cursor = db.reviews.find({"seller_id": seller["_id"]}, sort=[("created_at", -1)])
    reviews = [serialize_review(r) async for r in cursor]

    return {
        "success": True,
        "message": "Seller reviews",
        "count": len(reviews),
        "average_rating": seller.get("average_rating", 0),
        "total_reviews": seller.get("total_reviews", 0),
        "data": reviews,
    }
