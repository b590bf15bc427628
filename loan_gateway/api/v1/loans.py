"""/loan endpoints - loan intake and listing"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from loan_gateway.api.v1.schemas import LoanApplicationRequest, LoanResponseSchema
from loan_gateway.api.dependencies import get_admission_controller, get_origin_address, get_request_id
from loan_gateway.domain.admission import AdmissionController

router = APIRouter()


@router.post("/apply", response_model=LoanResponseSchema)
async def apply_for_loan(
    request_body: LoanApplicationRequest,
    request: Request,
    origin_address: Optional[str] = Depends(get_origin_address),
    controller: AdmissionController = Depends(get_admission_controller),
):
    """
    Apply for a loan.

    The request is admitted unless the applicant's country exceeded its
    application rate or the applicant is blacklisted. The payload is the
    personal id on success and the rejection reason otherwise.
    """
    response = await controller.apply_for_loan(
        request_body.to_domain(),
        origin_address,
        request_id=get_request_id(request),
    )
    return LoanResponseSchema.from_domain(response)


@router.get("/all", response_model=LoanResponseSchema)
def get_all(controller: AdmissionController = Depends(get_admission_controller)):
    """All loans as a JSON array of {amount, term, personal_id, country_code}"""
    return LoanResponseSchema.from_domain(controller.list_all())


@router.get("/by-user", response_model=LoanResponseSchema)
def get_by_user(
    name: str = Query(..., description="Applicant last name"),
    controller: AdmissionController = Depends(get_admission_controller),
):
    """Loans of applicants with the given last name"""
    return LoanResponseSchema.from_domain(controller.list_by_last_name(name))
