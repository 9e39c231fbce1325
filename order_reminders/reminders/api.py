import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from order_reminders.db.session import get_db
from .config import settings
from .runner import build_reconciler, run_tick


def verify_api_key_dependency(
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> bool:
    """
    Dependency to verify API key for trigger endpoints
    """
    if not settings.REQUIRE_API_KEY:
        return True

    api_key = None
    if x_api_key:
        api_key = x_api_key
    elif authorization and authorization.startswith("Bearer "):
        api_key = authorization.split(" ", 1)[1]

    if not api_key or not any(secrets.compare_digest(api_key.encode(), k.encode()) for k in settings.API_KEYS):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return True


router = APIRouter()


@router.get("/health")
def health_endpoint():
    return {"status": "ok"}


@router.post("/reconcile", dependencies=[Depends(verify_api_key_dependency)])
def reconcile_endpoint(db: Session = Depends(get_db)):
    """Run one reconciliation tick now. 500 when the due-reminder scan fails."""
    result = run_tick(build_reconciler(db))
    body = result.model_dump(exclude_none=True)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
    return body
