"""CSRF token route."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response
from pydantic import BaseModel

from plantour.config import Settings
from plantour.interface.api.security import generate_csrf_token

router = APIRouter(tags=["security"], route_class=DishkaRoute)


class CsrfTokenResponse(BaseModel):
    """Token to echo back in the CSRF header."""

    csrf_token: str


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def get_csrf_token(
    response: Response, settings: FromDishka[Settings]
) -> CsrfTokenResponse:
    """Issue a CSRF token.

    The token is set as a cookie readable by the frontend, which must send
    it back in the CSRF header on every mutating request.
    """
    token = generate_csrf_token()
    response.set_cookie(
        key=settings.security.csrf_cookie_name,
        value=token,
        httponly=False,  # The frontend reads it to fill the header
        secure=settings.security.cookie_secure,
        samesite="strict",
        path="/",
    )
    return CsrfTokenResponse(csrf_token=token)
