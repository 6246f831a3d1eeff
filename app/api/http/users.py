from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.domains.identity.entities import User
from app.domains.identity.schemas import MeResponse

router = APIRouter(tags=["users"])


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Идентификатор текущего пользователя по токену"""
    return MeResponse(user_id=current_user.uuid)
