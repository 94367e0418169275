from fastapi import HTTPException, status

# -------------------------------
# HTTP-facing domain errors
# -------------------------------
# Every subclass fixes its status code; handlers in main.py render
# them as {"success": false, "message": detail, **extra}.


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Something went wrong"

    def __init__(self, message: str | None = None, *, headers: dict | None = None, **extra):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.message,
            headers=headers,
        )
        self.extra = extra


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to modify this resource"


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class DuplicateEmail(ValidationFailed):
    message = "An account with this email already exists"


class InvalidCredentials(ValidationFailed):
    message = "Invalid email or password"


class InvalidRating(ValidationFailed):
    message = "Rating must be a whole number between 1 and 5"


class SelfReviewForbidden(ValidationFailed):
    message = "You cannot review your own listing"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class StorageFailure(AppError):
    message = "Storage is temporarily unavailable, please retry"


class RatingAggregateFailed(AppError):
    """
    The review is durably stored but the seller aggregate is stale.
    Clients must not resubmit; the reconcile worker repairs the aggregate.
    """
    message = "Review saved but seller rating update failed"

    def __init__(self, review_id: str):
        super().__init__(review_saved=True, review_id=review_id)
