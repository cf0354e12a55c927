"""Business ID generation.

IDs are prefixed random UUIDs ("bid_<hex>", "prd_<hex>", "ntf_<hex>") so that
an ID seen in a log line tells you which table it belongs to. Ordering never
relies on IDs; lists sort on (created_at, id).
"""

import uuid


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def new_bid_id() -> str:
    return generate_id("bid")


def new_product_id() -> str:
    return generate_id("prd")


def new_notification_id() -> str:
    return generate_id("ntf")
