from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..config import get_settings
from .base import BaseProvider

logger = logging.getLogger(__name__)


class FactbookProvider(BaseProvider):
    """
    CIA World Factbook documents from the factbook.json project.

    Documents are addressed by a relative path such as ``europe/fr.json``;
    see ``services.enrichment.FACTBOOK_DOCUMENTS``. The GitHub raw host and
    the jsDelivr CDN serve the same tree.
    """

    def __init__(self, base_url: Optional[str] = None, name: str = "Factbook (GitHub)", timeout: float = 30.0) -> None:
        super().__init__(timeout=timeout)
        self.base_url = (base_url or get_settings().factbook_base_url).rstrip("/")
        self._name = name

    @property
    def provider_name(self) -> str:
        return self._name

    async def fetch_document(self, path: str) -> Dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("Fetching factbook document %s", url)
        return self._expect_dict(await self._get_json(url), "factbook document")
