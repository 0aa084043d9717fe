# 📄 File: app/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# This file creates a smart HTTP client that knows how to talk to external services reliably,
# handling timeouts and errors when we send a plant photo off to be diagnosed.

# 🧪 Purpose (Technical Summary):
# Generic async HTTP client with status-code error mapping, retry of network-level failures,
# request logging and simple performance statistics for external API integrations.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - tenacity: Retry logic and backoff strategies

# 🔄 Connected Modules / Calls From:
# Used by: app.modules.plant_health.infrastructure.external.anthropic_client

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import aiohttp
from aiohttp import ClientSession, ClientTimeout
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.shared.core.exceptions import TransportError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - Retry with exponential backoff for network-level failures
    - Non-2xx responses mapped to TransportError
    - Request/response logging
    - Performance metrics
    - Authentication headers per provider
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        api_name: str,
        timeout: int = 30,
        max_retries: int = 1,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize API client with configuration."""
        self.base_url = base_url.rstrip('/') + '/'
        self.api_key = api_key
        self.api_name = api_name
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.extra_headers = extra_headers or {}

        self.session: Optional[ClientSession] = None

        # Performance tracking
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'average_response_time': 0,
            'last_request_time': None,
        }

    async def initialize(self):
        """Initialize the client session."""
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers=self._get_default_headers()
        )
        logger.info(f"API client initialized for {self.api_name}")

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default headers for requests."""
        headers = {
            'User-Agent': f'PlantHealth/1.0 ({self.api_name}-client)',
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        }

        if self.api_key:
            if 'anthropic' in self.api_name.lower() or 'claude' in self.api_name.lower():
                headers['x-api-key'] = self.api_key
            else:
                headers['Authorization'] = f'Bearer {self.api_key}'

        headers.update(self.extra_headers)
        return headers

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
            before_sleep=before_sleep_log(logger.logger, logging.WARNING),
            reraise=True,
        )

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request, retrying connection failures and timeouts."""
        if not self.session:
            await self.initialize()

        url = urljoin(self.base_url, endpoint.lstrip('/'))
        try:
            return await self._retrying()(self._send, method, url, data, headers)
        except TransportError:
            self.stats['failed_requests'] += 1
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.stats['failed_requests'] += 1
            raise self._transform_exception(e, method, url) from e

    async def _send(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
    ) -> Dict[str, Any]:
        start_time = time.time()

        async with self.session.request(method, url, json=data, headers=headers) as response:
            response_time = time.time() - start_time

            self.stats['total_requests'] += 1
            self.stats['last_request_time'] = datetime.now(timezone.utc).isoformat()
            if self.stats['average_response_time'] == 0:
                self.stats['average_response_time'] = response_time
            else:
                self.stats['average_response_time'] = (
                    self.stats['average_response_time'] * 0.7 + response_time * 0.3
                )

            await self._handle_response_status(response)

            try:
                response_data = await response.json(content_type=None)
            except ValueError:
                response_data = {'raw_response': await response.text()}

            self.stats['successful_requests'] += 1
            logger.info(
                f"{self.api_name} API request successful: "
                f"{method} {url} - {response.status} - {response_time:.2f}s"
            )
            return response_data

    async def _handle_response_status(self, response: aiohttp.ClientResponse):
        """Map non-success HTTP status codes to TransportError."""
        if 200 <= response.status < 300:
            return

        response_text = await response.text()
        if response.status in (401, 403):
            message = f"Authentication failed for {self.api_name}"
        elif response.status == 429:
            retry_after = response.headers.get('Retry-After', '60')
            message = f"Rate limit exceeded for {self.api_name}. Retry after {retry_after} seconds."
        elif 400 <= response.status < 500:
            message = f"Client error for {self.api_name} ({response.status}): {response_text}"
        elif 500 <= response.status < 600:
            message = f"Server error for {self.api_name} ({response.status}): {response_text}"
        else:
            message = f"Unexpected status code for {self.api_name}: {response.status}"

        logger.warning(message, extra={'api_name': self.api_name, 'status_code': response.status})
        raise TransportError(message, api_name=self.api_name, status_code_received=response.status)

    def _transform_exception(self, exception: Exception, method: str, url: str) -> TransportError:
        """Transform network exceptions to TransportError."""
        if isinstance(exception, asyncio.TimeoutError):
            return TransportError(f"Timeout for {self.api_name}: {method} {url}", api_name=self.api_name)
        return TransportError(f"Client error for {self.api_name}: {exception}", api_name=self.api_name)

    async def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make POST request."""
        return await self._make_request('POST', endpoint, data, headers)

    def get_stats(self) -> Dict[str, Any]:
        """Get client performance statistics."""
        return {
            **self.stats,
            'api_name': self.api_name,
            'error_rate': (
                self.stats['failed_requests'] / max(self.stats['total_requests'], 1)
            ) * 100,
        }

    async def close(self):
        """Close the client session and cleanup resources."""
        if self.session:
            await self.session.close()
            self.session = None

        logger.info(f"API client closed for {self.api_name}")


def create_api_client(
    api_name: str,
    base_url: str,
    api_key: str,
    **kwargs
) -> APIClient:
    """Factory function to create configured API client."""
    return APIClient(
        base_url=base_url,
        api_key=api_key,
        api_name=api_name,
        **kwargs
    )
