from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from typing import List, Optional
from datetime import date, datetime, timezone
import io
import csv
from storehouse.dependencies import get_warehouse
from storehouse.models.movement import MovementType
from storehouse.schemas.movement import MovementFilter, MovementResponse
from storehouse.services.ledger import EXPORT_HEADERS
from storehouse.services.warehouse import Warehouse

router = APIRouter(
    prefix="/history",
    tags=["history"]
)


def _history_filter(
    start_date: Optional[date] = Query(None, description="First day of the range (YYYY-MM-DD), requires end_date"),
    end_date: Optional[date] = Query(None, description="Last day of the range (YYYY-MM-DD), requires start_date"),
    movement_types: Optional[List[MovementType]] = Query(None, description="Filter by movement types"),
    search: Optional[str] = Query(None, description="Keyword to match product, code, client, location or details")
) -> MovementFilter:
    return MovementFilter(
        start_date=start_date,
        end_date=end_date,
        movement_types=movement_types,
        search=search
    )


@router.get("/", response_model=List[MovementResponse])
def get_history(
    filters: MovementFilter = Depends(_history_filter),
    warehouse: Warehouse = Depends(get_warehouse)
):
    """Movement history, newest first"""
    return warehouse.ledger.search(filters)


@router.get("/export")
def export_history_csv(
    filters: MovementFilter = Depends(_history_filter),
    warehouse: Warehouse = Depends(get_warehouse)
):
    """
    Export history matching the same filters as the list endpoint.
    Returns a streaming CSV attachment.
    """
    rows = warehouse.ledger.export_rows(filters)

    def iter_csv():
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(EXPORT_HEADERS)
        yield buf.getvalue()
        buf.seek(0); buf.truncate(0)
        for r in rows:
            writer.writerow([r.get(h, "") for h in EXPORT_HEADERS])
            yield buf.getvalue()
            buf.seek(0); buf.truncate(0)

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    filename = f"history_{stamp}.csv"
    return StreamingResponse(iter_csv(), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
