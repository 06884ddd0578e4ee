import aiohttp
import asyncio
import os
from typing import Any, AsyncIterator, Callable, Dict
from pydantic import ValidationError
from tqdm import tqdm

from core.exceptions import ConfigurationError, PointsApiError
from core.pagination import PaginationPolicy
from importers.base_importer import BasePointsImporter
from models.page_result import PageResult, PointsHistoryRequest, PointsHistoryResponse


DEFAULT_BASE_URL = "https://sceneplus.webapis.loyaltysite.ca"
DEFAULT_ORIGIN = "https://www.sceneplus.ca"
DEFAULT_HISTORY_PATH = "/api/customer/points/history"


class ScenePlusImporter(BasePointsImporter):
    """Scene+ points history API importer."""

    def __init__(self, config: Dict[str, Any], session_factory: Callable = None):
        super().__init__(config)
        api_config = config.get('api', {})
        self.base_url = api_config.get('base_url', DEFAULT_BASE_URL).rstrip('/')
        self.origin = api_config.get('origin', DEFAULT_ORIGIN)
        self.history_path = api_config.get('history_path', DEFAULT_HISTORY_PATH)
        self.timeout = api_config.get('timeout', 30)
        self.show_progress = config.get('reporting', {}).get('show_progress', True)
        self.session_factory = session_factory or aiohttp.ClientSession

        # Get API token from environment
        token_env = api_config.get('token_env', 'SCENE_API_TOKEN')
        self.api_token = os.getenv(token_env)

        if not self.api_token:
            error_msg = f"Missing Scene+ API token (set {token_env})"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

    def _get_platform_name(self) -> str:
        return "sceneplus"

    def source_identifier(self) -> str:
        return f"{self.base_url}{self.history_path}"

    def _headers(self) -> Dict[str, str]:
        return {
            'authorization': f'Bearer {self.api_token}',
            'origin': self.origin,
            'content-type': 'application/json'
        }

    async def iter_pages(self, policy: PaginationPolicy) -> AsyncIterator[PageResult]:
        """Fetch pages sequentially, page 1 first, until the policy stops."""
        async with self.session_factory() as session:
            pbar = tqdm(desc="Fetching points history", unit="page", disable=not self.show_progress)

            try:
                page = 1
                while True:
                    result = await self._fetch_page(session, policy.build_request(page), page)
                    result, is_last = policy.inspect(result, page)

                    if pbar.total is None:
                        pbar.total = policy.expected_pages(result)
                        pbar.refresh()
                    pbar.update(1)

                    self.logger.info(
                        f"Page {page}: {len(result.transactions)} transactions "
                        f"(totalItemCount={result.total_item_count})"
                    )
                    if result.past_window:
                        self.logger.info(f"Page {page} reached transactions before {policy.start_date}, stopping")

                    yield result

                    if is_last:
                        break
                    page += 1
            finally:
                pbar.close()

    async def _fetch_page(self,
                          session: aiohttp.ClientSession,
                          request: PointsHistoryRequest,
                          page: int) -> PageResult:
        """Fetch and parse a single page. Any failure aborts the run."""
        url = self.source_identifier()

        try:
            async with session.post(url,
                                    headers=self._headers(),
                                    json=request.to_payload(),
                                    timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
                if response.status != 200:
                    body = await response.text()
                    raise PointsApiError(
                        f"failed request for page {page}\n{response.status}\n{body}",
                        status=response.status,
                        body=body
                    )

                data = await response.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise PointsApiError(f"API request failed for page {page}: {e}") from e

        try:
            parsed = PointsHistoryResponse.model_validate(data)
        except ValidationError as e:
            raise PointsApiError(f"Unexpected response body for page {page}: {e}") from e

        return PageResult.from_response(parsed, page)
