"""Brain and node routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shelfwatch.api.dependencies import get_devices_store
from shelfwatch.models.dto import BrainView, DeviceListResponse, DeviceSummaryOut, NodeView
from shelfwatch.projection import summarize_devices
from shelfwatch.stores import DevicesStore

router = APIRouter()


@router.get(
    "/networks/{network_id}/locations/{location_id}/devices",
    response_model=DeviceListResponse,
    summary="Brains and nodes with online state",
)
async def list_devices(store: DevicesStore = Depends(get_devices_store)) -> DeviceListResponse:
    summary = summarize_devices(store.brains, store.nodes)
    return DeviceListResponse(
        network_id=store.network_id,
        location_id=store.location_id,
        loading=store.loading,
        error=store.error,
        projected_at=store.projected_at,
        brains=[BrainView.from_view_model(brain) for brain in store.brains],
        nodes=[NodeView.from_view_model(node) for node in store.nodes],
        summary=DeviceSummaryOut(**summary.to_dict()),
    )


__all__ = ["router"]
