from fastapi import APIRouter, Depends, Query, status

from ..schemas.member import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ErrorResponse,
    MemberEnvelope,
    MemberListResponse,
    MemberPayload,
    MessageResponse,
)
from ..services.member import MemberService
from ..services.validation import validate_member
from .dependencies import get_member_service

router = APIRouter()

ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    409: {"model": ErrorResponse, "description": "National id already registered"},
}


@router.get("", response_model=MemberListResponse)
def list_records(service: MemberService = Depends(get_member_service)):
    """
    Get all records, ordered by the numeric part of the national id.
    """
    return {"rows": service.list_members()}


@router.get("/search", response_model=MemberListResponse)
def search_records(
    q: str = Query("", description="Part of a name or national id"),
    service: MemberService = Depends(get_member_service),
):
    return {"rows": service.search_members(q)}


@router.post(
    "",
    response_model=MemberEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERRORS[400], 409: ERRORS[409]},
)
def create_record(
    payload: MemberPayload,
    service: MemberService = Depends(get_member_service),
):
    """
    Create a record. Dates are sent as DD/MM/YYYY.
    """
    return {"record": service.create_member(validate_member(payload))}


@router.post(
    "/bulk-delete",
    response_model=BulkDeleteResponse,
    responses={404: ERRORS[404]},
)
def bulk_delete_records(
    request: BulkDeleteRequest,
    service: MemberService = Depends(get_member_service),
):
    """
    Delete several records one by one, stopping at the first failure.
    """
    return {"deleted": service.delete_members(request.ids)}


@router.get("/{member_id}", response_model=MemberEnvelope, responses={404: ERRORS[404]})
def get_record(member_id: int, service: MemberService = Depends(get_member_service)):
    return {"record": service.get_member(member_id)}


@router.put("/{member_id}", response_model=MemberEnvelope, responses=ERRORS)
def update_record(
    member_id: int,
    payload: MemberPayload,
    service: MemberService = Depends(get_member_service),
):
    """
    Replace every field of an existing record.
    """
    return {"record": service.update_member(member_id, validate_member(payload))}


@router.delete("/{member_id}", response_model=MessageResponse, responses={404: ERRORS[404]})
def delete_record(member_id: int, service: MemberService = Depends(get_member_service)):
    service.delete_member(member_id)
    return {"message": f"Record {member_id} deleted"}
