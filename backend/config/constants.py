# backend/config/constants.py

# -----------------------------
# REVIEWS
# -----------------------------

MIN_RATING = 1
MAX_RATING = 5

# -----------------------------
# PASSWORDS
# -----------------------------

MIN_PASSWORD_LENGTH = 6
MAX_BCRYPT_BYTES = 72                 # bcrypt hard limit

# -----------------------------
# PROFILES
# -----------------------------

# fields a user may change after signup
PROFILE_FIELDS = ("name", "phone", "bio", "profile_picture")
