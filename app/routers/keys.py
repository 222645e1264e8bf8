# app/routers/keys.py
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.core.auth import require_auth
from app.core.config import get_settings

router = APIRouter(prefix="/keys", tags=["Keys"])

settings = get_settings()


@router.get(
    "/google",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_auth)],
)
def google_api_key():
    """
    Google Maps key for the shipping step's map picker ("nokey" if unset).
    """
    return settings.GOOGLE_API_KEY or "nokey"
