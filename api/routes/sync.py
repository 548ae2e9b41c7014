"""
Operational sync endpoints (push to / pull from the content mirror).

Invoked by schedulers and admin tools, hence CORS-open; gated by the
X-Sync-Secret header when SYNC_API_SECRET is set.
"""
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from api.dependencies import get_order_reconciler, require_sync_secret
from core.application.dtos import SyncResponseDTO, SyncStatsDTO
from core.application.services import OrderReconciler


logger = logging.getLogger(__name__)
router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Sync-Secret",
}


def _sync_response(payload: SyncResponseDTO, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload.model_dump(), headers=CORS_HEADERS)


def _failure_response(error: Exception) -> JSONResponse:
    return _sync_response(
        SyncResponseDTO(success=False, stats=SyncStatsDTO(errors=1), message=str(error) or type(error).__name__),
        status_code=500,
    )


@router.options("/sync-orders")
@router.options("/sync-from-sanity")
async def sync_preflight():
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


@router.post("/sync-orders", dependencies=[Depends(require_sync_secret)])
async def sync_orders(reconciler: OrderReconciler = Depends(get_order_reconciler)):
    """Push every local order to the content mirror."""
    try:
        stats = await reconciler.export_orders()
    except Exception as e:
        logger.error(f"❌ Sync failed: {e}", exc_info=True)
        return _failure_response(e)

    return _sync_response(
        SyncResponseDTO(
            success=True,
            stats=SyncStatsDTO.from_stats(stats),
            message=(
                f"Sync completed. Created: {stats.created}, Updated: {stats.updated}, "
                f"Errors: {stats.errors}"
            ),
        )
    )


@router.post("/sync-from-sanity", dependencies=[Depends(require_sync_secret)])
async def sync_from_sanity(reconciler: OrderReconciler = Depends(get_order_reconciler)):
    """Pull every content-mirror order into the order store."""
    try:
        stats = await reconciler.import_orders()
    except Exception as e:
        logger.error(f"❌ Sync from Sanity failed: {e}", exc_info=True)
        return _failure_response(e)

    return _sync_response(
        SyncResponseDTO(
            success=True,
            stats=SyncStatsDTO.from_stats(stats),
            message=(
                f"Sanity to DB sync completed. Created: {stats.created}, "
                f"Updated: {stats.updated}, Errors: {stats.errors}"
            ),
        )
    )
