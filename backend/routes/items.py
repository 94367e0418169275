from fastapi import APIRouter, Depends, status
from pymongo import ReturnDocument
from datetime import datetime

from database import get_db
from models.item import ItemCreate, ItemUpdate
from models.user import Identity
from utils.errors import NotFound, ValidationFailed
from utils.guards import load_owned_item, parse_object_id
from utils.security import get_current_identity
from utils.serializers import serialize_item
from utils.users import increment_listing_count

router = APIRouter(tags=["Items"])

# =========================
# OWNER: CREATE / LIST OWN ITEMS
# =========================

@router.post("/my-items", status_code=status.HTTP_201_CREATED)
async def create_item(
    data: ItemCreate,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    owner_id = parse_object_id(identity.id, "user id")
    now = datetime.utcnow()

    item = {
        "name": data.name.strip(),
        "description": data.description,
        "category": data.category.strip().lower(),
        "availability": data.availability,
        "price": data.price,
        "owner_id": owner_id,
        "created_at": now,
        "updated_at": now,
    }

    result = await db.items.insert_one(item)
    item["_id"] = result.inserted_id

    await increment_listing_count(db, owner_id, 1)

    return {
        "success": True,
        "message": "Item created successfully",
        "data": serialize_item(item),
    }


@router.get("/my-items")
async def my_items(
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    cursor = db.items.find(
        {"owner_id": parse_object_id(identity.id, "user id")},
        sort=[("created_at", -1)],
    )

    items = [serialize_item(i) async for i in cursor]

    return {
        "success": True,
        "message": "Your items",
        "count": len(items),
        "data": items,
    }

# =========================
# PUBLIC: ITEM DETAIL
# =========================

@router.get("/items/{item_id}")
async def item_detail(item_id: str, db=Depends(get_db)):
    item = await db.items.find_one({"_id": parse_object_id(item_id, "item_id")})
    if not item:
        raise NotFound("Item not found")

    return {
        "success": True,
        "message": "Item found",
        "data": serialize_item(item),
    }

# =========================
# OWNER: UPDATE / DELETE (OWNERSHIP GUARDED)
# =========================

@router.put("/items/{item_id}")
async def update_item(
    item_id: str,
    data: ItemUpdate,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    # ownership is settled before any field is touched
    item = await load_owned_item(db, item_id, identity)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise ValidationFailed("No fields to update")

    if "category" in updates:
        updates["category"] = updates["category"].strip().lower()
    updates["updated_at"] = datetime.utcnow()

    updated = await db.items.find_one_and_update(
        {"_id": item["_id"], "owner_id": item["owner_id"]},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise NotFound("Item not found")

    return {
        "success": True,
        "message": "Item updated successfully",
        "data": serialize_item(updated),
    }


@router.delete("/items/{item_id}")
async def delete_item(
    item_id: str,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    item = await load_owned_item(db, item_id, identity)

    # reviews are kept; they still count toward the seller rating
    result = await db.items.delete_one({"_id": item["_id"], "owner_id": item["owner_id"]})
    if not result.deleted_count:
        raise NotFound("Item not found")

    await increment_listing_count(db, item["owner_id"], -1)

    return {
        "success": True,
        "message": "Item deleted successfully",
    }
