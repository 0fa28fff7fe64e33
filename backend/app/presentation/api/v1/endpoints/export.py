"""CSV export endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.application.services import RecordExportService
from app.infrastructure.dependencies import get_record_export_service

router = APIRouter(prefix="/export", tags=["Export"])


@router.get("/csv")
async def export_csv(
    service: RecordExportService = Depends(get_record_export_service),
) -> Response:
    """Download every record as a CSV attachment named with the date and row count."""
    export = await service.export_csv()
    return Response(
        content=export.content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Total-Count": str(export.row_count),
        },
    )
