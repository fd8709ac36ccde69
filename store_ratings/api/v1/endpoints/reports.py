"""
Admin reporting endpoints:
  GET /admin/dashboard        – Platform totals
  GET /admin/reports/users    – CSV export of all accounts
  GET /admin/reports/stores   – CSV export of all stores
"""
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
import logging

from store_ratings.core.dependencies import db_dependency, require_admin
from store_ratings.models.user import Identity
from store_ratings.schemas.rating import AdminDashboardResponse
from store_ratings.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin: Reports"])


def _csv_response(content: str, name: str) -> Response:
    filename = f"{name}_report_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get(
    "/dashboard",
    response_model=AdminDashboardResponse,
    summary="Platform totals",
)
def dashboard(
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return ReportService(conn).dashboard_totals()


@router.get(
    "/reports/users",
    response_class=Response,
    summary="Export users as CSV",
)
def users_report(
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    logger.info("Exporting users report")
    return _csv_response(ReportService(conn).users_csv(), "users")


@router.get(
    "/reports/stores",
    response_class=Response,
    summary="Export stores as CSV",
)
def stores_report(
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    logger.info("Exporting stores report")
    return _csv_response(ReportService(conn).stores_csv(), "stores")
