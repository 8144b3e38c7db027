from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.app.use_cases.auth import AccountInfo
from src.depends import get_current_account

router = APIRouter(prefix="/auth", tags=["User"])


class ProtectedResponse(BaseModel):
    """GET /auth/protected response payload"""

    message: str
    account: AccountInfo


@router.get("/protected", status_code=status.HTTP_200_OK, response_model=ProtectedResponse)
async def protected(current_account: AccountInfo = Depends(get_current_account)):
    """
    Protected Route

    Reachable only with a current session token.

    Raises:
        - 401 Unauthorized: Missing, expired, invalid or outdated token
    """
    return ProtectedResponse(
        message="You have accessed a protected route!",
        account=current_account,
    )
