"""Base class of the HTTP clients talking to a search backend.

Subclasses name their backend type and engine ("search" / "Elasticsearch"),
which also fixes their env prefix: SEARCH_ELASTICSEARCH_BASE_URL, ...
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes

from escroll.helper.HelperConfig import HelperConfig
from escroll.models.config import EnvConfig


class ClientInterface(ABC):
    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        # SEARCH_TIMEOUT; scroll pages can be large, so keep it generous
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)

        self._client: httpx.AsyncClient | None = None
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """Fail fast on a missing backend setting, before any scroll is opened.

        Raises:
            ValueError: If a required setting (e.g. SEARCH_ELASTICSEARCH_BASE_URL) is missing or invalid.
        """
        for config in self._get_required_config():
            self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """Lowercase backend type, e.g. "search"."""
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        pass

    def get_engine_name(self) -> str:
        """Lowercase engine name, e.g. "elasticsearch". Used in logs and the /health response."""
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns the engine settings checked at construction.

        Returns:
            list[EnvConfig]: One entry per setting, keyed without the SEARCH_<ENGINE>_ prefix.
        """
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        return f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Reads an engine setting, e.g. get_config_val("INDEX") reads SEARCH_ELASTICSEARCH_INDEX.

        Args:
            raw_key (str): The setting name without prefix.
            default (Any): Returned when the setting is not set. None makes it required.
            val_type (str): "string", "number", "bool" or "list".

        Raises:
            ValueError: If the setting is required but missing, or val_type is unknown.
        """
        key = self._get_config_key_name(raw_key)
        readers = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
            "bool": self._helper_config.get_bool_val,
            "list": self._helper_config.get_list_val,
        }
        if val_type not in readers:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} client '{self.get_engine_name()}'.")
        return readers[val_type](key, default=default)

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the Authorization header for the backend, or {} for an open cluster.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the cluster URL (e.g. "http://localhost:9200").
        """
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns the path probed by do_healthcheck() (e.g. "/_cluster/health").
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Probe the backend before serving exports.

        Returns:
            httpx.Response: The health response, whose JSON is passed on by GET /health.

        Raises:
            Exception: If the backend answers with a non-2xx status.
        """
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck(), raise_on_error=True)

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Open the HTTP connection pool.

        Args:
            transport (httpx.AsyncBaseTransport | None): Replaces the network transport, e.g. with httpx.MockTransport.
        """
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP connection pool. Open scroll contexts are not affected."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        json: dict | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send one request to the search backend.

        Search, scroll and clear-scroll calls all carry a JSON body; the
        initial search also carries the keep-alive as a query parameter.

        Args:
            method: HTTP method. Clear-scroll uses DELETE with a body.
            json: JSON request body.
            params: URL query parameters.
            endpoint: Path appended to the base URL (leading slash optional).
            raise_on_error: Raise when the backend answers with a non-2xx status.

        Returns:
            The raw httpx.Response.

        Raises:
            Exception: If boot() was not called, or on a non-2xx status when raise_on_error is True.
            httpx.HTTPError: If the request fails on the transport level.
        """
        if self._client is None:
            raise Exception("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""
        url = f"{self._get_base_url().rstrip('/')}{endpoint}"

        response = await self._client.request(
            method,
            url,
            json=json,
            params=params,
            headers=self._get_auth_header(),
            timeout=self.timeout,
        )

        if raise_on_error and response.status_code >= 300:
            # the body holds the backend's error type, e.g. search_context_missing_exception
            self.logging.error("Request to %s failed with status %d: %s", url, response.status_code, response.text)
            raise Exception(f"Request to {url} failed with status {response.status_code}")

        return response
