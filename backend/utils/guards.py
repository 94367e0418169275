from bson import ObjectId
from bson.errors import InvalidId

from utils.errors import Forbidden, NotFound, ValidationFailed

# -------------------------------
# ObjectId Guard
# -------------------------------

def parse_object_id(value, name: str = "id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value).strip())
    except (InvalidId, TypeError):
        raise ValidationFailed(f"Invalid {name}")


def normalize_id(value) -> str | None:
    """Canonical string form for ids coming from tokens, paths or documents."""
    if value is None:
        return None
    return str(value).strip()


# -------------------------------
# Ownership Guard
# -------------------------------

def authorize_owner(resource_owner_id, requester_id) -> None:
    owner = normalize_id(resource_owner_id)
    requester = normalize_id(requester_id)

    if not owner or not requester or owner != requester:
        raise Forbidden()


async def load_owned_item(db, item_id: str, identity) -> dict:
    """
    Fetch the current item and make sure the requester owns it.
    Must run before any mutation of the item.
    """
    item = await db.items.find_one({"_id": parse_object_id(item_id, "item_id")})
    if not item:
        raise NotFound("Item not found")

    authorize_owner(item.get("owner_id"), identity.id)
    return item
