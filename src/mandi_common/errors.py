"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Product / inventory
  3xxx: Bid
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired credentials", 401)


# --- 2xxx: Product / inventory ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class ProductUnavailableError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2002, f"Product not found or not available: {product_id}", 422)


class PricingTierUnavailableError(AppError):
    def __init__(self, buyer_type: str) -> None:
        tier = "Wholesale" if buyer_type == "B2B" else "Retail"
        super().__init__(2003, f"{tier} pricing not available for this product", 422)


class BelowMinimumQuantityError(AppError):
    def __init__(self, min_quantity: int, unit: str) -> None:
        self.min_quantity = min_quantity
        super().__init__(
            2004, f"Minimum quantity for wholesale is {min_quantity} {unit}", 422
        )


class InsufficientInventoryError(AppError):
    def __init__(self, requested: int, available: int, unit: str) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            2005,
            f"Only {available} {unit} available, requested {requested} {unit}",
            409,
        )


# --- 3xxx: Bid ---

class BidNotFoundError(AppError):
    def __init__(self, bid_id: str) -> None:
        super().__init__(3001, f"Bid not found: {bid_id}", 404)


class InvalidTransitionError(AppError):
    def __init__(self, bid_id: str, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            3002,
            f"Bid {bid_id} is already {from_status}, cannot move to {to_status}",
            409,
        )


class NotAuthorizedError(AppError):
    def __init__(self, detail: str = "Not authorized to act on this bid") -> None:
        super().__init__(3003, detail, 403)


class BidExpiredError(AppError):
    def __init__(self, bid_id: str) -> None:
        super().__init__(3004, f"Bid {bid_id} has expired and can no longer be accepted", 410)


class InvalidFilterError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3005, f"Invalid bid filter: {detail}", 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9001, detail, 500)


class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Storage backend unavailable") -> None:
        super().__init__(9002, detail, 503)
