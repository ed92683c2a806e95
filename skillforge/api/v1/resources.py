from fastapi import APIRouter, Query, Request

from skillforge.core.rate_limit import rate_limit
from skillforge.schemas.tools import ResourcesResponse
from skillforge.services.resource_service import find_learning_videos

router = APIRouter()


@router.get("/resources", response_model=ResourcesResponse)
@rate_limit()
def learning_resources(request: Request, skill: str = Query(default="", max_length=200)):
    return {"success": True, "data": find_learning_videos(skill)}
