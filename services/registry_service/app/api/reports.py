from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ..config.settings import settings
from ..exceptions import InvalidDateFormat
from ..schemas.member import ErrorResponse
from ..services.member import MemberService
from ..services.pdf import ReportStyle, TablePdfRenderer
from ..services.reports import get_report_definition
from ..utils.dates import parse_day_month
from .dependencies import get_member_service

router = APIRouter()


class ReportType(str, Enum):
    ACTIVE_MEMBERS = "active-members"
    RETIREES = "retirees"
    SURVIVORS = "survivors"
    DECEASED = "deceased"
    BIRTHDAYS = "birthdays"


@router.get(
    "/{report_type}",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF listing"},
        400: {"model": ErrorResponse, "description": "Invalid day/month"},
        404: {"model": ErrorResponse, "description": "No records match the report"},
    },
)
def render_report(
    report_type: ReportType,
    day_month: Optional[str] = Query(None, description="DD/MM, required for birthdays"),
    service: MemberService = Depends(get_member_service),
):
    """
    Render a PDF listing of the records selected by the report.
    """
    selected_day = None
    if report_type == ReportType.BIRTHDAYS:
        if not day_month:
            raise InvalidDateFormat("Birthday report needs day_month as DD/MM")
        selected_day = parse_day_month(day_month)

    definition = get_report_definition(report_type.value, selected_day)
    table = definition.build_table(service.list_members(), title_lines=[settings.ORGANIZATION_NAME])
    style = ReportStyle.for_orientation(
        definition.landscape, margin=settings.REPORT_MARGIN, font_size=definition.font_size
    )
    report = TablePdfRenderer(style).render(table)

    return Response(
        content=report.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{report_type.value}.pdf"',
            "X-Page-Count": str(report.page_count),
        },
    )
