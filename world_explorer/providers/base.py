from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..exceptions import SchemaError, TransportError
from ..services.http_pool import get_http_client

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseProvider(ABC):
    """Common HTTP and validation plumbing for upstream data sources."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and decode JSON, mapping failures onto the error taxonomy."""
        client = get_http_client()
        try:
            response = await client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"{self.provider_name} returned HTTP {exc.response.status_code}",
                details={"url": url},
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{self.provider_name} request failed",
                details={"url": url},
                original_error=exc,
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise SchemaError(
                f"{self.provider_name} returned invalid JSON",
                details={"url": url},
                original_error=exc,
            ) from exc

    def _expect_list(self, payload: Any, what: str) -> List[Any]:
        if not isinstance(payload, list):
            raise SchemaError(
                f"{self.provider_name} {what} payload must be a list",
                details={"type": type(payload).__name__},
            )
        return payload

    def _expect_dict(self, payload: Any, what: str) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise SchemaError(
                f"{self.provider_name} {what} payload must be an object",
                details={"type": type(payload).__name__},
            )
        return payload

    def _validate_items(self, items: List[Any], model: Type[ModelT], what: str) -> List[ModelT]:
        """Validate every element; a single malformed element rejects the response."""
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as exc:
            raise SchemaError(
                f"{self.provider_name} {what} element failed validation",
                details={"errors": exc.error_count()},
                original_error=exc,
            ) from exc
