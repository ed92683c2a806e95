from fastapi import APIRouter, Request

from skillforge.core.rate_limit import rate_limit
from skillforge.schemas.common import DataResponse
from skillforge.schemas.tools import RoadmapRequest
from skillforge.services.roadmap_service import generate_roadmap

router = APIRouter()


@router.post("/roadmap", response_model=DataResponse)
@rate_limit()
def roadmap(request: Request, payload: RoadmapRequest):
    return DataResponse(data=generate_roadmap(payload.skill, payload.current_level))
