from typing import Optional

from pydantic import BaseModel, Field

from geoparty.services.scoring import ScoringPolicyName


class LocationResponse(BaseModel):
    lat: float
    lng: float
    name: Optional[str] = None


class CameraResponse(BaseModel):
    heading: int
    pitch: int
    fov: int


class RoundTargetResponse(BaseModel):
    """A fresh round target together with the ground-level view to show for it."""

    location: LocationResponse
    image_url: str
    camera: CameraResponse
    placeholder: bool


class ScoreRequest(BaseModel):
    guess_lat: float = Field(ge=-90, le=90)
    guess_lng: float = Field(ge=-180, le=180)
    actual_lat: float = Field(ge=-90, le=90)
    actual_lng: float = Field(ge=-180, le=180)
    policy: Optional[ScoringPolicyName] = None


class ScoreResponse(BaseModel):
    distance_km: float
    points: int
    policy: ScoringPolicyName
