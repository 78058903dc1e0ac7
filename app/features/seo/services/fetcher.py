import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from app.platform.config import settings
from app.platform.exceptions import UpstreamFetchError
from app.platform.logger import get_logger
from app.platform.utils.url_validator import ensure_public_target

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    requested_url: str
    final_url: str  # after redirects
    status_code: int
    html: str


class PageFetcher:
    """
    Fetches one HTML document.

    - per-phase httpx timeout plus an overall deadline
    - body streamed and capped at max_bytes
    - redirects followed by hand so every hop passes ensure_public_target
    """

    def __init__(
        self,
        timeout: float = settings.FETCH_TIMEOUT,
        max_bytes: int = settings.FETCH_MAX_BYTES,
        max_redirects: int = settings.FETCH_MAX_REDIRECTS,
        user_agent: str = settings.FETCH_USER_AGENT,
        block_private_targets: bool = settings.BLOCK_PRIVATE_TARGETS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.max_redirects = max_redirects
        self.block_private_targets = block_private_targets
        self.headers = {
            "User-Agent": user_agent,
            "Accept": settings.FETCH_ACCEPT,
        }
        self._transport = transport

    async def fetch(self, url: str) -> FetchedPage:
        try:
            return await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Fetch timed out after {self.timeout}s: {url}")
            raise UpstreamFetchError(
                f"Timed out fetching the page after {self.timeout:g} seconds."
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"Fetch timed out: {url} ({type(e).__name__})")
            raise UpstreamFetchError(
                f"Timed out fetching the page after {self.timeout:g} seconds."
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Network error fetching {url}: {e!r}")
            raise UpstreamFetchError() from e

    async def _fetch(self, url: str) -> FetchedPage:
        current = url
        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=False,
            transport=self._transport,
        ) as client:
            for _ in range(self.max_redirects + 1):
                ensure_public_target(current, block_private=self.block_private_targets)

                async with client.stream("GET", current) as response:
                    if response.is_redirect:
                        target = str(response.url.join(response.headers["Location"]))
                        logger.info(f"Redirect {response.status_code}: {current} -> {target}")
                        current = target
                        continue

                    if not response.is_success:
                        logger.warning(
                            f"Upstream returned {response.status_code} {response.reason_phrase} for {current}"
                        )
                        raise UpstreamFetchError(
                            upstream_status=response.status_code,
                            upstream_reason=response.reason_phrase,
                        )

                    html = await self._read_limited_text(response)
                    return FetchedPage(
                        requested_url=url,
                        final_url=str(response.url),
                        status_code=response.status_code,
                        html=html,
                    )

        logger.warning(f"Too many redirects (>{self.max_redirects}) starting at {url}")
        raise UpstreamFetchError(f"Too many redirects (more than {self.max_redirects}).")

    async def _read_limited_text(self, response: httpx.Response) -> str:
        too_large = UpstreamFetchError(
            f"The page is larger than {self.max_bytes} bytes and was not analyzed."
        )

        content_length = response.headers.get("Content-Length", "")
        if content_length.isdigit() and int(content_length) > self.max_bytes:
            raise too_large

        chunks = []
        size = 0
        async for chunk in response.aiter_bytes():
            size += len(chunk)
            if size > self.max_bytes:
                raise too_large
            chunks.append(chunk)

        data = b"".join(chunks)
        encoding = response.encoding or "utf-8"
        try:
            return data.decode(encoding, errors="replace")
        except LookupError:
            return data.decode("utf-8", errors="replace")
