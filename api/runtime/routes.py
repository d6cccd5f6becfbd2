from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}
