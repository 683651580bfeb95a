"""Tour invitation routes (owner side)."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator

from plantour.application.usecase.invitation import (
    ListTourInvitationsRequest,
    ListTourInvitationsResponse,
    ListTourInvitationsUseCase,
    SendInvitationsRequest,
    SendInvitationsResponse,
    SendInvitationsUseCase,
)
from plantour.interface.api.security import (
    CurrentUser,
    rate_limited_user,
    verify_csrf,
)

router = APIRouter(
    prefix="/tours",
    tags=["invitations"],
    route_class=DishkaRoute,
    dependencies=[Depends(verify_csrf)],
)


class SendInvitationsAPIRequest(BaseModel):
    """API request for inviting people to a tour.

    Send either a list of addresses or the raw text typed by the user.
    """

    emails: list[str] | None = Field(default=None, min_length=1, max_length=50)
    text: str | None = None

    @field_validator("emails")
    @classmethod
    def check_unique(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and len({email.strip().lower() for email in v}) != len(v):
            raise ValueError("Email addresses must be unique")
        return v

    @model_validator(mode="after")
    def check_source(self) -> "SendInvitationsAPIRequest":
        if (self.emails is None) == (self.text is None):
            raise ValueError("Provide either emails or text")
        return self


@router.post(
    "/{tour_id}/invitations",
    response_model=SendInvitationsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_invitations(
    tour_id: UUID,
    request: SendInvitationsAPIRequest,
    send_invitations_use_case: FromDishka[SendInvitationsUseCase],
    user: CurrentUser = Depends(rate_limited_user("invitations")),
) -> SendInvitationsResponse:
    """Invite email addresses to a tour.

    Args:
        tour_id: Tour to invite to
        request: Addresses, as a list or free text
        send_invitations_use_case: Send invitations use case from DI
        user: Authenticated tour owner

    Returns:
        Sent, skipped and failed addresses, plus undelivered emails
    """
    return await send_invitations_use_case.execute(
        SendInvitationsRequest(
            tour_id=tour_id,
            inviter_id=user.user_id,
            emails=request.emails,
            text=request.text,
        )
    )


@router.get("/{tour_id}/invitations", response_model=ListTourInvitationsResponse)
async def list_tour_invitations(
    tour_id: UUID,
    list_tour_invitations_use_case: FromDishka[ListTourInvitationsUseCase],
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(rate_limited_user()),
) -> ListTourInvitationsResponse:
    """List a tour's invitations for its owner, newest first."""
    return await list_tour_invitations_use_case.execute(
        ListTourInvitationsRequest(
            tour_id=tour_id, caller_id=user.user_id, page=page, limit=limit
        )
    )
