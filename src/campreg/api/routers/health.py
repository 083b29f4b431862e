# src/campreg/api/routers/health.py
import sqlalchemy as sa
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campreg.db.session import get_db

router = APIRouter(tags=["health"])

@router.get("/healthz", include_in_schema=False)
def healthz():
    return {"status": "ok"}

@router.get("/healthz/db", include_in_schema=False)
async def healthz_db(session: AsyncSession = Depends(get_db)):
    await session.execute(sa.text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
