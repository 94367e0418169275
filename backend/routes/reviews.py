from fastapi import APIRouter, Depends, status

from database import get_db
from models.review import CreateReview
from models.user import Identity
from utils.errors import NotFound
from utils.guards import parse_object_id
from utils.ratings import submit_review
from utils.security import get_current_identity
from utils.serializers import serialize_review

router = APIRouter(tags=["Reviews"])

# -------------------------------------------------
# CREATE REVIEW (ANY AUTHENTICATED NON-OWNER)
# -------------------------------------------------

@router.post("/items/{item_id}/reviews", status_code=status.HTTP_201_CREATED)
async def create_review(
    item_id: str,
    data: CreateReview,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    item = await db.items.find_one({"_id": parse_object_id(item_id, "item_id")})
    if not item:
        raise NotFound("Listing not found")

    review = await submit_review(db, item, identity.id, data.rating, data.comment)

    return {
        "success": True,
        "message": "Review submitted successfully",
        "data": serialize_review(review),
    }


# -------------------------------------------------
# PUBLIC: GET ITEM REVIEWS
# -------------------------------------------------

@router.get("/items/{item_id}/reviews")
async def get_item_reviews(item_id: str, db=Depends(get_db)):
    cursor = db.reviews.find(
        {"item_id": parse_object_id(item_id, "item_id")},
        sort=[("created_at", -1)],
    )

    reviews = [serialize_review(r) async for r in cursor]

    return {
        "success": True,
        "message": "Item reviews",
        "count": len(reviews),
        "data": reviews,
    }
