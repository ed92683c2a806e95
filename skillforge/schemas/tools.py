from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RoadmapLevel = Literal["Beginner", "Intermediate", "Advanced"]


class GithubRequest(BaseModel):
    username: str = Field(default="", max_length=100)


class RoadmapRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    skill: str = Field(default="", max_length=200)
    current_level: RoadmapLevel = Field(default="Beginner", alias="currentLevel")


class LearningVideo(BaseModel):
    title: str
    channel: str = ""
    url: str
    thumbnail: str = ""


class LearningResources(BaseModel):
    videos: list[LearningVideo] = Field(default_factory=list)


class ResourcesResponse(BaseModel):
    success: Literal[True] = True
    data: LearningResources
