"""mandi_bidding REST endpoints.

POST /bids            : buyer places a bid
PUT  /bids/{bid_id}   : accept / reject / complete / cancel
GET  /bids/{bid_id}   : bid detail (buyer or vendor of the bid)
GET  /bids            : list by product_id | buyer_id | vendor_id, cursor pagination
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request, status

from src.mandi_bidding.application.schemas import PlaceBidRequest, UpdateBidStatusRequest
from src.mandi_bidding.application.service import BidLedgerService, get_bid_ledger
from src.mandi_common.response import ApiResponse, request_response
from src.mandi_gateway.auth.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/bids", tags=["bids"])

LedgerDep = Annotated[BidLedgerService, Depends(get_bid_ledger)]
UserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def place_bid(
    request: Request,
    body: PlaceBidRequest,
    current_user: UserDep,
    ledger: LedgerDep,
) -> ApiResponse:
    result = await ledger.place_bid(current_user, body)
    return request_response(request, result.model_dump(mode="json"), "Bid placed")


@router.put("/{bid_id}", response_model=ApiResponse)
async def update_bid_status(
    bid_id: str,
    request: Request,
    body: UpdateBidStatusRequest,
    current_user: UserDep,
    ledger: LedgerDep,
) -> ApiResponse:
    result = await ledger.update_bid_status(current_user, bid_id, body)
    return request_response(request, result.model_dump(mode="json"), f"Bid {result.status}")


@router.get("/{bid_id}", response_model=ApiResponse)
async def get_bid(
    bid_id: str,
    request: Request,
    current_user: UserDep,
    ledger: LedgerDep,
) -> ApiResponse:
    result = await ledger.get_bid(current_user, bid_id)
    return request_response(request, result.model_dump(mode="json"))


@router.get("", response_model=ApiResponse)
async def list_bids(
    request: Request,
    current_user: UserDep,
    ledger: LedgerDep,
    product_id: str | None = Query(None),
    buyer_id: str | None = Query(None),
    vendor_id: str | None = Query(None),
    bid_status: Literal["pending", "accepted", "rejected", "completed", "cancelled"]
    | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await ledger.list_bids(
        current_user,
        product_id=product_id,
        buyer_id=buyer_id,
        vendor_id=vendor_id,
        status=bid_status,
        cursor=cursor,
        limit=limit,
    )
    return request_response(request, result.model_dump(mode="json"))
