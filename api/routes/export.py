"""Processing-orders CSV export for fulfilment."""
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from api.dependencies import get_orders_exporter, require_sync_secret
from core.application.services import ProcessingOrdersExporter
from core.domain.value_objects import utc_now


logger = logging.getLogger(__name__)
router = APIRouter()


@router.options("/export-processing-orders")
async def export_preflight():
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, X-Sync-Secret",
        },
    )


@router.get("/export-processing-orders", dependencies=[Depends(require_sync_secret)])
async def export_processing_orders(exporter: ProcessingOrdersExporter = Depends(get_orders_exporter)):
    """
    Download the content mirror's PROCESSING orders as CSV.

    404 when there is nothing to ship.
    """
    content = await exporter.render_csv()
    if content is None:
        return JSONResponse(status_code=404, content={"message": "No processing orders found"})

    filename = f"processing-orders-{utc_now().date().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Access-Control-Allow-Origin": "*",
        },
    )
