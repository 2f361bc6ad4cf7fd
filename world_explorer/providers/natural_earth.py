from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import get_settings
from ..exceptions import SchemaError
from ..models import BoundaryFeature
from .base import BaseProvider

logger = logging.getLogger(__name__)


class _GeoJSONFeature(BaseModel):
    type: str = "Feature"
    properties: Dict[str, Any] = Field(default_factory=dict)
    geometry: Optional[Dict[str, Any]] = None


class NaturalEarthProvider(BaseProvider):
    """Natural Earth admin-0 country boundaries as a GeoJSON FeatureCollection."""

    def __init__(self, url: Optional[str] = None, timeout: float = 60.0) -> None:
        super().__init__(timeout=timeout)
        self.url = url or get_settings().natural_earth_url

    @property
    def provider_name(self) -> str:
        return "Natural Earth"

    async def fetch_features(self) -> List[BoundaryFeature]:
        payload = self._expect_dict(await self._get_json(self.url), "boundary")
        if payload.get("type") != "FeatureCollection":
            raise SchemaError("Boundary payload is not a FeatureCollection", details={"type": payload.get("type")})
        features = self._expect_list(payload.get("features"), "boundary features")
        validated = self._validate_items(features, _GeoJSONFeature, "boundary feature")
        logger.info("Natural Earth: %d boundary features loaded", len(validated))
        return [BoundaryFeature(properties=item.properties, geometry=item.geometry) for item in validated]
