from bson import ObjectId
from datetime import datetime


def serialize_object_id(value):
    return str(value) if isinstance(value, ObjectId) else value


def serialize_datetime(value):
    return value.isoformat() if isinstance(value, datetime) else None


def serialize_user(user: dict) -> dict:
    # password digest is never part of a payload
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "phone": user.get("phone"),
        "bio": user.get("bio"),
        "profile_picture": user.get("profile_picture"),
        "average_rating": user.get("average_rating", 0),
        "total_reviews": user.get("total_reviews", 0),
        "total_listings": user.get("total_listings", 0),
        "created_at": serialize_datetime(user.get("created_at")),
    }


def serialize_seller(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "bio": user.get("bio"),
        "profile_picture": user.get("profile_picture"),
        "average_rating": user.get("average_rating", 0),
        "total_reviews": user.get("total_reviews", 0),
        "total_listings": user.get("total_listings", 0),
        "created_at": serialize_datetime(user.get("created_at")),
    }


def serialize_item(item: dict) -> dict:
    return {
        "id": str(item["_id"]),
        "owner_id": serialize_object_id(item.get("owner_id")),
        "name": item.get("name"),
        "description": item.get("description"),
        "category": item.get("category"),
        "availability": item.get("availability"),
        "price": item.get("price"),
        "created_at": serialize_datetime(item.get("created_at")),
        "updated_at": serialize_datetime(item.get("updated_at")),
    }


def serialize_review(review: dict) -> dict:
    return {
        "id": str(review["_id"]),
        "item_id": serialize_object_id(review["item_id"]),
        "seller_id": serialize_object_id(review["seller_id"]),
        "reviewer_id": serialize_object_id(review["reviewer_id"]),
        "rating": review["rating"],
        "comment": review.get("comment"),
        "created_at": serialize_datetime(review.get("created_at")),
    }
