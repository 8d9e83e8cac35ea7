from app.domain.services_interfaces.aiohttp_service import AiohttpServiceInterface
from typing import Optional
import aiohttp


class AiohttpService(AiohttpServiceInterface):
    def __init__(self):
        self.aiohttp_client: Optional[aiohttp.ClientSession] = None

    def _session(self) -> aiohttp.ClientSession:
        # ClientSession must be created inside a running event loop
        if self.aiohttp_client is None or self.aiohttp_client.closed:
            self.aiohttp_client = aiohttp.ClientSession()
        return self.aiohttp_client

    async def post(self, url, payload, headers=None):
        async with self._session().post(url, json=payload, headers=headers) as response:
            response.raise_for_status()
            try:
                return await response.json()
            except aiohttp.ContentTypeError:
                return {'text': await response.text()}

    async def close(self):
        if self.aiohttp_client is not None:
            await self.aiohttp_client.close()
            self.aiohttp_client = None
