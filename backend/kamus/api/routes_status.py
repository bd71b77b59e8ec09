from datetime import datetime

from fastapi import APIRouter

router = APIRouter(tags=["status"])


@router.get("/health")
def health():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}
