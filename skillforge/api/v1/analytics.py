from fastapi import APIRouter, Depends, Header

from skillforge.analytics import db as analytics_db
from skillforge.core.security import check_api_key

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_api_key(x_api_key)


@router.get("/analytics/ai-summary")
def ai_summary(_: None = Depends(_auth)):
    return analytics_db.get_ai_summary()
