from fastapi import APIRouter, Depends

from app.core.security import Authenticated, require_principal
from app.schemas.response import SuccessResponse
from app.services import outlet_service

router = APIRouter()


@router.delete("/me", response_model=SuccessResponse)
async def delete_account_endpoint(principal: Authenticated = Depends(require_principal)):
    """Deletes the caller's account, its restaurants and outlets, and its cart."""
    await outlet_service.delete_account(principal)
    return SuccessResponse(message="Account deleted")
