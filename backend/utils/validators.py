import re

PHONE_REGEX = re.compile(r"^\+?\d{7,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_phone(phone: str) -> str:
    phone = PHONE_SEPARATORS.sub("", (phone or "").strip())

    if not PHONE_REGEX.match(phone):
        raise ValueError("Invalid phone number format")

    return phone
