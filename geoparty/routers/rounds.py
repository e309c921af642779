import random

from fastapi import APIRouter

from geoparty.config import settings
from geoparty.schemas.round import (
    CameraResponse,
    LocationResponse,
    RoundTargetResponse,
    ScoreRequest,
    ScoreResponse,
)
from geoparty.services.imagery import StreetViewProvider, ground_view_for
from geoparty.services.location_selector import select_location
from geoparty.services.scoring import ScoringPolicyName, get_scoring_policy, haversine_km

router = APIRouter(prefix="/rounds", tags=["rounds"])

_rng = random.Random()


@router.get("/location", response_model=RoundTargetResponse)
async def new_round_target():
    location = select_location(_rng)
    view = ground_view_for(StreetViewProvider(), location, _rng)
    return RoundTargetResponse(
        location=LocationResponse(lat=location.lat, lng=location.lng, name=location.name),
        image_url=view.image_url,
        camera=CameraResponse(heading=view.camera.heading, pitch=view.camera.pitch, fov=view.camera.fov),
        placeholder=view.placeholder,
    )


@router.post("/score", response_model=ScoreResponse)
async def score_guess(body: ScoreRequest):
    policy_name = body.policy or settings.scoring_policy
    distance = haversine_km(body.guess_lat, body.guess_lng, body.actual_lat, body.actual_lng)
    points = get_scoring_policy(policy_name)(distance)
    return ScoreResponse(distance_km=distance, points=points, policy=policy_name)
