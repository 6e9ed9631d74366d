"""
Fleet Management API — Test Email Routes
========================================

What:  Lets administrators check the SMTP setup end to end.
Who:   Principals holding ROLE_ADMIN only.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from fleet_api.dependencies import ADMIN_AUTHORITY, get_email_service, require_authority
from fleet_api.schemas.common import ErrorResponse, MessageResponse
from fleet_api.services.email_service import EmailService

router = APIRouter(
    prefix="/api/emails",
    tags=["Emails"],
    dependencies=[Depends(require_authority(ADMIN_AUTHORITY))],
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        403: {"description": "Requires ROLE_ADMIN", "model": ErrorResponse},
        502: {"description": "Mail transport failed", "model": ErrorResponse},
    },
)


class EmailRequest(BaseModel):
    email: EmailStr


@router.post("/plain-text", response_model=MessageResponse, summary="Send a plain-text test email")
async def send_plain_text(
    body: EmailRequest,
    email_service: EmailService = Depends(get_email_service),
) -> MessageResponse:
    await email_service.send_plain_text(body.email)
    return MessageResponse(message=f"Email sent to {body.email}")


@router.post(
    "/attachment",
    response_model=MessageResponse,
    summary="Send a test email with the static attachment",
)
async def send_with_attachment(
    body: EmailRequest,
    email_service: EmailService = Depends(get_email_service),
) -> MessageResponse:
    await email_service.send_with_static_attachment(body.email)
    return MessageResponse(message=f"Email with attachment sent to {body.email}")
