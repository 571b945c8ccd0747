import logging

import httpx

logger = logging.getLogger(__name__)


class Fetcher:
    """Single GET per call. Never raises: any failure yields an empty document."""

    def __init__(self, client: httpx.AsyncClient, user_agent: str | None = None):
        self._client = client
        self._headers = {"Accept-Language": "ja,en;q=0.9"}
        if user_agent:
            self._headers["User-Agent"] = user_agent

    async def fetch(self, url: str) -> str:
        try:
            resp = await self._client.get(
                url, follow_redirects=True, headers=self._headers
            )
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            logger.debug("Failed to fetch %s: %s", url, exc)
            return ""
        return resp.text
