"""
Profile API Client
==================
"""

import logging
from typing import Any, Dict

import httpx

from api.http import ApiError, BaseClient

logger = logging.getLogger(__name__)


class ProfileClient(BaseClient):

    async def fetch_user_profile(self, uid: str) -> Dict[str, Any]:
        if not uid:
            raise ValueError("User ID is required")
        try:
            data = await self._get(f"{self.base_url}/currentuser/currentuser/{uid}",
                                   default_message="Failed to fetch user profile")
        except (httpx.HTTPError, ApiError) as e:
            logger.error("Failed to fetch user profile %s: %s", uid, e)
            raise
        if isinstance(data, dict) and data.get("user"):
            return data["user"]
        return data
