from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"ok": True, "service": "backend", "time": datetime.now(timezone.utc).isoformat()}
