"""Nacos configuration service client wrapper."""
import logging
from typing import Optional

import httpx

from .errors import NacosConfigError, NacosConnectionError
from .models import ConnectionParameters, RawConfigResponse, DEFAULT_CONTEXT_PATH

logger = logging.getLogger(__name__)

MD5_HEADER = "Content-MD5"


class NacosConfigClient:
    """Wrapper around the Nacos open API for one config retrieval.

    An injected httpx.AsyncClient is left open on exit; a client created
    here is closed.
    """

    def __init__(
        self,
        params: ConnectionParameters,
        password: str,
        context_path: str = DEFAULT_CONTEXT_PATH,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.params = params
        self._password = password
        self.base_url = f"{params.scheme}://{params.server_addr}{context_path}"
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NacosConfigClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def login(self) -> Optional[str]:
        """
        Authenticate with username and password.

        Returns:
            Access token, or None when the server runs without auth or rejects the login

        Raises:
            NacosConnectionError: If the server is unreachable or fails the login with a 5xx
        """
        url = f"{self.base_url}/v1/auth/login"
        try:
            response = await self.client.post(
                url,
                data={"username": self.params.username, "password": self._password},
            )
        except httpx.HTTPError as e:
            raise NacosConnectionError(
                f"Failed to connect to nacos: {self.params.server_addr}: {e}"
            ) from e

        if response.is_client_error:
            # Servers without auth answer unknown users with 403; the config GET decides
            logger.warning(
                f"Login to nacos {self.params.server_addr} as {self.params.username} rejected "
                f"with HTTP {response.status_code}, continuing without access token"
            )
            return None
        if response.status_code != 200:
            raise NacosConnectionError(
                f"Failed to log in to nacos: {self.params.server_addr} as "
                f"{self.params.username}: HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise NacosConnectionError(
                f"Unexpected login response from nacos: {self.params.server_addr}: {e}"
            ) from e
        if not isinstance(body, dict):
            raise NacosConnectionError(
                f"Unexpected login response from nacos: {self.params.server_addr}: {body!r}"
            )

        token = body.get("accessToken")
        if not token:
            logger.debug(f"No access token issued by {self.params.server_addr}")
        return token

    async def get_config(self, access_token: Optional[str] = None) -> RawConfigResponse:
        """
        Fetch the configuration for the data id and group in params.

        Args:
            access_token: Token returned by login, if any

        Returns:
            RawConfigResponse with content and the server's md5

        Raises:
            NacosConnectionError: On transport failures
            NacosConfigError: If the server does not return the config
        """
        data_id = self.params.data_id
        group = self.params.group
        query = {"dataId": data_id, "group": group, "tenant": self.params.namespace}
        if access_token:
            query["accessToken"] = access_token

        try:
            response = await self.client.get(f"{self.base_url}/v1/cs/configs", params=query)
        except httpx.HTTPError as e:
            raise NacosConnectionError(
                f"Failed to connect to nacos: {self.params.server_addr}: {e}"
            ) from e

        if response.status_code == 404:
            raise NacosConfigError(
                f"Config not found in nacos, data_id: {data_id}, group: {group}, "
                f"namespace: {self.params.namespace}"
            )
        if not response.is_success:
            raise NacosConfigError(
                f"Failed to get config from nacos, data_id: {data_id}, group: {group}: "
                f"HTTP {response.status_code}"
            )

        return RawConfigResponse(
            content=response.text,
            md5=response.headers.get(MD5_HEADER),
            data_id=data_id,
            group=group,
            namespace=self.params.namespace,
        )

    async def fetch(self) -> RawConfigResponse:
        """Log in, then fetch the configuration."""
        token = await self.login()
        raw = await self.get_config(token)
        logger.info(
            f"Fetched config from nacos {self.params.server_addr}, "
            f"data_id: {raw.data_id}, group: {raw.group}"
        )
        return raw
