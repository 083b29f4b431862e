# src/campreg/api/routers/me.py
from fastapi import APIRouter, Depends

from campreg.app_logger import get_logger
from campreg.auth.deps import require_auth
from campreg.db.models import User
from campreg.schemas.user import UserOut

router = APIRouter(tags=["me"])
log = get_logger("routers.me")

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(require_auth)) -> UserOut:
    log.debug("[/me] OK id=%s role=%s", user.id, user.role.value)
    return UserOut.model_validate(user)
