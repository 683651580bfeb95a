"""Invitation routes (invitee side, plus owner cancel and resend)."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel

from plantour.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    CancelInvitationRequest,
    CancelInvitationUseCase,
    DeclineInvitationRequest,
    DeclineInvitationResponse,
    DeclineInvitationUseCase,
    GetInvitationByTokenRequest,
    GetInvitationByTokenResponse,
    GetInvitationByTokenUseCase,
    ListPendingInvitationsRequest,
    ListPendingInvitationsResponse,
    ListPendingInvitationsUseCase,
    ResendInvitationRequest,
    ResendInvitationResponse,
    ResendInvitationUseCase,
)
from plantour.domain.value import InvitationToken
from plantour.interface.api.security import (
    CurrentUser,
    rate_limited_client,
    rate_limited_user,
    verify_csrf,
)

router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
    route_class=DishkaRoute,
    dependencies=[Depends(verify_csrf)],
)


class RespondAPIRequest(BaseModel):
    """Optional token from the invitation link."""

    token: InvitationToken | None = None


@router.get(
    "/by-token/{token}",
    response_model=GetInvitationByTokenResponse,
    dependencies=[Depends(rate_limited_client)],
)
async def get_invitation_by_token(
    get_invitation_by_token_use_case: FromDishka[GetInvitationByTokenUseCase],
    token: str = Path(min_length=32, max_length=64, pattern=r"^[A-Za-z0-9]+$"),
) -> GetInvitationByTokenResponse:
    """Show an invitation from its link. No session required."""
    return await get_invitation_by_token_use_case.execute(
        GetInvitationByTokenRequest(token=InvitationToken(token))
    )


@router.get("/pending", response_model=ListPendingInvitationsResponse)
async def list_pending_invitations(
    list_pending_invitations_use_case: FromDishka[ListPendingInvitationsUseCase],
    user: CurrentUser = Depends(rate_limited_user()),
) -> ListPendingInvitationsResponse:
    """Open invitations addressed to the signed-in user's email."""
    return await list_pending_invitations_use_case.execute(
        ListPendingInvitationsRequest(email=user.email)
    )


@router.post("/{invitation_id}/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    invitation_id: UUID,
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
    request: RespondAPIRequest | None = None,
    user: CurrentUser = Depends(rate_limited_user()),
) -> AcceptInvitationResponse:
    """Accept an invitation and join the tour.

    Returns 200 both when the user joins and when they already participate;
    ``outcome`` tells the two apart.
    """
    return await accept_invitation_use_case.execute(
        AcceptInvitationRequest(
            invitation_id=invitation_id,
            user_id=user.user_id,
            user_email=user.email,
            token=request.token if request else None,
        )
    )


@router.post("/{invitation_id}/decline", response_model=DeclineInvitationResponse)
async def decline_invitation(
    invitation_id: UUID,
    decline_invitation_use_case: FromDishka[DeclineInvitationUseCase],
    request: RespondAPIRequest | None = None,
    user: CurrentUser = Depends(rate_limited_user()),
) -> DeclineInvitationResponse:
    """Decline an invitation."""
    return await decline_invitation_use_case.execute(
        DeclineInvitationRequest(
            invitation_id=invitation_id,
            user_id=user.user_id,
            user_email=user.email,
            token=request.token if request else None,
        )
    )


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_invitation(
    invitation_id: UUID,
    cancel_invitation_use_case: FromDishka[CancelInvitationUseCase],
    user: CurrentUser = Depends(rate_limited_user()),
) -> None:
    """Cancel an invitation that has not been accepted (tour owner only)."""
    await cancel_invitation_use_case.execute(
        CancelInvitationRequest(
            invitation_id=invitation_id,
            caller_id=user.user_id,
            caller_email=user.email,
        )
    )


@router.post("/{invitation_id}/resend", response_model=ResendInvitationResponse)
async def resend_invitation(
    invitation_id: UUID,
    resend_invitation_use_case: FromDishka[ResendInvitationUseCase],
    user: CurrentUser = Depends(rate_limited_user()),
) -> ResendInvitationResponse:
    """Re-issue a declined or expired invitation (tour owner only)."""
    return await resend_invitation_use_case.execute(
        ResendInvitationRequest(
            invitation_id=invitation_id,
            caller_id=user.user_id,
            caller_email=user.email,
        )
    )
