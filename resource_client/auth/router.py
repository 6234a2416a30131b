"""FastAPI router for end-user identity endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from .dependencies import get_authenticated_user
from .models import CurrentUserResponse, User


router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse, response_model_by_alias=True)
async def current_user_endpoint(
    user: Annotated[User, Depends(get_authenticated_user)],
) -> CurrentUserResponse:
    """Return the end user the request is acting for."""
    return CurrentUserResponse(user=user)
