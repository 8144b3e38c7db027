from datetime import UTC, datetime

from fastapi import APIRouter, status

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health():
    return {"status": "UP", "timestamp": datetime.now(UTC).isoformat()}
