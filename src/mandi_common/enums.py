"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class BidStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BuyerType(str, Enum):
    B2B = "B2B"
    B2C = "B2C"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class UserRole(str, Enum):
    VENDOR = "vendor"
    B2B_BUYER = "b2b_buyer"
    B2C_BUYER = "b2c_buyer"


class NotificationType(str, Enum):
    NEW_BID = "new_bid"
    BID_STATUS_UPDATE = "bid_status_update"
