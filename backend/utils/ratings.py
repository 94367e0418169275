import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from pymongo.errors import PyMongoError

from config.constants import MIN_RATING, MAX_RATING
from utils.errors import InvalidRating, RatingAggregateFailed, SelfReviewForbidden
from utils.guards import normalize_id, parse_object_id
from utils.users import set_rating_aggregate

logger = logging.getLogger(__name__)

# ============================================================
# SELLER RATING AGGREGATE
# ============================================================
# users.average_rating / users.total_reviews are derived from the
# reviews collection and can always be rebuilt from it. Reviews are
# never edited or deleted, which keeps the review count monotonic.
# ============================================================


def round_rating(total: int, count: int) -> float:
    if not count:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def validate_rating(rating) -> int:
    # bool is an int subclass; True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating()
    return rating


async def compute_seller_rating(db, seller_id) -> tuple[float, int]:
    pipeline = [
        {"$match": {"seller_id": seller_id}},
        {
            "$group": {
                "_id": "$seller_id",
                "total": {"$sum": "$rating"},
                "count": {"$sum": 1},
            }
        },
    ]

    agg = await db.reviews.aggregate(pipeline).to_list(1)
    if not agg:
        return 0.0, 0

    return round_rating(agg[0]["total"], agg[0]["count"]), agg[0]["count"]


async def refresh_seller_rating(db, seller_id) -> tuple[float, int]:
    average, count = await compute_seller_rating(db, seller_id)
    await set_rating_aggregate(db, seller_id, average, count)
    return average, count


# ============================================================
# REVIEW SUBMISSION
# ============================================================

async def submit_review(
    db,
    item: dict,
    reviewer_id: str,
    rating,
    comment: str | None = None,
) -> dict:
    seller_id = item["owner_id"]

    # 1️⃣ Validate
    if normalize_id(seller_id) == normalize_id(reviewer_id):
        raise SelfReviewForbidden()
    rating = validate_rating(rating)

    # 2️⃣ Insert review (a failure here propagates, no aggregate work)
    review = {
        "item_id": item["_id"],
        "seller_id": seller_id,
        "reviewer_id": parse_object_id(reviewer_id, "reviewer_id"),
        "rating": rating,
        "comment": comment,
        "created_at": datetime.utcnow(),
    }
    result = await db.reviews.insert_one(review)
    review["_id"] = result.inserted_id

    # 3️⃣ + 4️⃣ Recompute from the full set and store
    try:
        average, count = await refresh_seller_rating(db, seller_id)
    except PyMongoError:
        logger.exception(
            "RATING_AGGREGATE_ERROR seller=%s review=%s", seller_id, review["_id"]
        )
        raise RatingAggregateFailed(str(review["_id"]))

    logger.info(
        "REVIEW_CREATED seller=%s review=%s average=%s count=%s",
        seller_id, review["_id"], average, count,
    )
    return review


# ============================================================
# RECONCILIATION (SAFE REPAIR ENGINE)
# ============================================================

async def reconcile_seller_rating(db, seller_id) -> bool:
    """
    Rebuild one seller's aggregate from scratch.
    Returns True when the stored values had drifted and were repaired.
    """
    seller = await db.users.find_one(
        {"_id": seller_id},
        {"average_rating": 1, "total_reviews": 1},
    )
    if not seller:
        return False

    average, count = await compute_seller_rating(db, seller_id)

    stored_avg = seller.get("average_rating", 0)
    stored_count = seller.get("total_reviews", 0)
    if stored_count == count and stored_avg == average:
        return False

    # a stored count above the real one can only come from corruption
    repaired = await set_rating_aggregate(
        db, seller_id, average, count, force=stored_count > count
    )
    if repaired:
        logger.warning(
            "RATING_DRIFT_REPAIRED seller=%s stored=(%s, %s) actual=(%s, %s)",
            seller_id, stored_avg, stored_count, average, count,
        )
    return repaired


async def reconcile_all_ratings(db) -> int:
    repaired = 0
    seen = set()

    sellers = await db.reviews.aggregate([{"$group": {"_id": "$seller_id"}}]).to_list(None)

    for row in sellers:
        seller_id = row["_id"]
        seen.add(normalize_id(seller_id))
        if await reconcile_seller_rating(db, seller_id):
            repaired += 1

    # aggregates with no reviews behind them
    cursor = db.users.find({"total_reviews": {"$gt": 0}}, {"_id": 1})
    async for user in cursor:
        if normalize_id(user["_id"]) in seen:
            continue
        if await reconcile_seller_rating(db, user["_id"]):
            repaired += 1

    return repaired
