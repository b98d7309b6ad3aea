# =============================================================================
# app/routers/reports.py - Printable Reports and Operation Logs
# =============================================================================
# - POST /print/generate: PDF report selected by reportType
# - GET /logpage: operation log entries (optionally filtered)
# - GET /logpage/print-logs: the filtered operation log as a PDF
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query
from fastapi.responses import Response

from app.auth import get_operator
from app.dependencies import LogServiceDep, ReportServiceDep
from core.models.logs import Operator
from core.models.report import Report
from core.services.report_service import parse_report_type
from lib.pdf_report import render_report_pdf

logger = logging.getLogger(__name__)

print_router = APIRouter()
logs_router = APIRouter()


def _pdf_response(report: Report) -> Response:
    return Response(
        content=render_report_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{report.filename}"'},
    )


# =============================================================================
# Reports
# =============================================================================

@print_router.post("/generate")
async def generate_report(
    reports: ReportServiceDep,
    logs: LogServiceDep,
    report_type: Annotated[str | None, Form(alias="reportType")] = None,
    operator: Operator = Depends(get_operator),
):
    """
    Generate a PDF report.

    reportType is one of: received, extracted, completed, accounts, all.
    """
    kind = parse_report_type(report_type)
    report = reports.build(kind)

    logs.log_action(operator, f"Generated {kind.value} report")
    return _pdf_response(report)


# =============================================================================
# Operation Logs
# =============================================================================

@logs_router.get("")
async def list_operation_logs(
    logs: LogServiceDep,
    column: Annotated[str | None, Query(description="Column to filter on")] = None,
    query: Annotated[str | None, Query(description="Case-insensitive text to match")] = None,
):
    """
    Operation log entries, newest first.
    """
    return {"logs": logs.list_logs(column=column, query=query)}


@logs_router.get("/print-logs")
async def print_operation_logs(
    reports: ReportServiceDep,
    column: Annotated[str | None, Query(description="Column to filter on")] = None,
    query: Annotated[str | None, Query(description="Case-insensitive text to match")] = None,
):
    """
    The (filtered) operation log as a PDF.
    """
    return _pdf_response(reports.build_log_report(column=column, query=query))
