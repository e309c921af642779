"""Ground-level imagery for a round target.

Imagery is an external capability. A failure to produce a view never fails
the round: the caller gets the configured placeholder instead.
"""

import logging
import random
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode

from geoparty.config import settings
from geoparty.services.location_selector import MAX_IMAGERY_LATITUDE, Location

logger = logging.getLogger(__name__)

DEFAULT_FOV = 90


class ImageryUnavailable(Exception):
    """The imagery provider cannot serve a view for the requested point."""


@dataclass(frozen=True)
class CameraAngle:
    heading: int
    pitch: int
    fov: int = DEFAULT_FOV


@dataclass(frozen=True)
class GroundView:
    image_url: str
    camera: CameraAngle
    placeholder: bool = False


class ImageryProvider(Protocol):
    def render_ground_view(self, lat: float, lng: float, heading: int, pitch: int, fov: int) -> str: ...


class StreetViewProvider:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        size: str | None = None,
    ) -> None:
        self.base_url = settings.imagery_base_url if base_url is None else base_url
        self.api_key = settings.imagery_api_key if api_key is None else api_key
        self.size = size or settings.imagery_size

    def render_ground_view(self, lat: float, lng: float, heading: int, pitch: int, fov: int) -> str:
        if not self.base_url:
            raise ImageryUnavailable("No imagery endpoint configured")
        if abs(lat) > MAX_IMAGERY_LATITUDE:
            raise ImageryUnavailable(f"No ground-level coverage at latitude {lat}")

        params = {
            "size": self.size,
            "location": f"{lat},{lng}",
            "heading": heading,
            "pitch": pitch,
            "fov": fov,
        }
        if self.api_key:
            params["key"] = self.api_key
        return f"{self.base_url}?{urlencode(params)}"


def random_camera(rng: random.Random | None = None) -> CameraAngle:
    rng = rng or random.Random()
    return CameraAngle(heading=rng.randrange(0, 360), pitch=rng.randrange(-30, 30))


def ground_view_for(
    provider: ImageryProvider,
    location: Location,
    rng: random.Random | None = None,
) -> GroundView:
    camera = random_camera(rng)
    try:
        url = provider.render_ground_view(
            location.lat, location.lng, camera.heading, camera.pitch, camera.fov
        )
    except ImageryUnavailable as exc:
        logger.warning(
            "Imagery unavailable at (%.5f, %.5f), using placeholder: %s",
            location.lat,
            location.lng,
            exc,
        )
        return GroundView(image_url=settings.imagery_placeholder_url, camera=camera, placeholder=True)
    return GroundView(image_url=url, camera=camera)
