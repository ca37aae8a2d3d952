"""Live inventory routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from shelfwatch.api.dependencies import get_inventory_store
from shelfwatch.models.dto import SlotListResponse, SlotView, StatusSummaryResponse
from shelfwatch.projection import count_by_status
from shelfwatch.stores import InventoryStore

router = APIRouter()

LOADING_RETRY_AFTER_S = 1


@router.get(
    "/networks/{network_id}/locations/{location_id}/slots",
    response_model=SlotListResponse,
    summary="Projected slots for a location",
)
async def list_slots(store: InventoryStore = Depends(get_inventory_store)) -> SlotListResponse:
    return SlotListResponse(
        **_store_state(store),
        slots=[SlotView.from_view_model(slot) for slot in store.slots],
    )


@router.get(
    "/networks/{network_id}/locations/{location_id}/slots/{slot_id}",
    response_model=SlotView,
    summary="One projected slot",
    responses={404: {"description": "Slot not found"}, 503: {"description": "First projection pending"}},
)
async def get_slot(
    slot_id: str,
    store: InventoryStore = Depends(get_inventory_store),
) -> SlotView:
    slot = store.find_slot(slot_id)
    if slot is None:
        if store.loading:
            raise HTTPException(
                status_code=503,
                detail="Slot data is still loading",
                headers={"Retry-After": str(LOADING_RETRY_AFTER_S)},
            )
        raise HTTPException(status_code=404, detail="Slot not found")
    return SlotView.from_view_model(slot)


@router.get(
    "/networks/{network_id}/locations/{location_id}/summary",
    response_model=StatusSummaryResponse,
    summary="Slot counts per status",
)
async def slot_summary(store: InventoryStore = Depends(get_inventory_store)) -> StatusSummaryResponse:
    return StatusSummaryResponse(
        **_store_state(store),
        total=len(store.slots),
        counts=count_by_status(store.slots),
    )


def _store_state(store: InventoryStore) -> dict[str, object]:
    return {
        "network_id": store.network_id,
        "location_id": store.location_id,
        "loading": store.loading,
        "error": store.error,
        "projected_at": store.projected_at,
    }


__all__ = ["router"]
