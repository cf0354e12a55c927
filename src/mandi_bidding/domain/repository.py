"""BidRepository Protocol."""

from datetime import datetime
from typing import Protocol

from src.mandi_bidding.domain.models import Bid, CounterOffer
from src.mandi_store.domain.store import Condition, StartKey


class BidRepositoryProtocol(Protocol):
    async def save(self, bid: Bid) -> None: ...

    async def get_by_id(self, bid_id: str) -> Bid | None: ...

    async def transition(
        self,
        bid: Bid,
        to_status: str,
        updated_at: datetime,
        vendor_message: str | None = None,
        counter_offer: CounterOffer | None = None,
    ) -> Bid:
        """Write `to_status` only if the stored status still equals `bid.status`.

        Raises InvalidTransitionError (carrying the status found) when it does
        not, and BidNotFoundError when the bid has disappeared.
        """
        ...

    async def list_by(
        self,
        index: str,
        value: str,
        filters: list[Condition],
        start_after: StartKey | None,
        limit: int,
    ) -> list[Bid]: ...
