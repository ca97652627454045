import base64

from escroll.clients.search.SearchClientInterface import SearchClientInterface
from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.helper.HelperConfig import HelperConfig
from escroll.models.config import EnvConfig


class SearchClientElasticsearch(SearchClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")
        self._username = self.get_config_val("USERNAME", default="", val_type="string")
        self._password = self.get_config_val("PASSWORD", default="", val_type="string")
        self._index = self.get_config_val("INDEX", default="", val_type="string") or None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Elasticsearch"

    def get_default_index(self) -> str | None:
        return self._index

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="USERNAME", val_type="string", default=""),
            EnvConfig(env_key="PASSWORD", val_type="string", default=""),
            EnvConfig(env_key="INDEX", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"ApiKey {self._api_key}"}
        if self._username:
            token = base64.b64encode(f"{self._username}:{self._password}".encode("utf-8")).decode("ascii")
            return {"Authorization": f"Basic {token}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/_cluster/health"

    def _get_endpoint_search(self, index: str | None) -> str:
        return f"/{index}/_search" if index else "/_search"

    def _get_endpoint_scroll(self) -> str:
        return "/_search/scroll"

    def _get_endpoint_clear_scroll(self) -> str:
        return "/_search/scroll"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_search_params(self, query: ScrollQuery) -> dict:
        return {"scroll": query.scroll}

    def get_search_payload(self, query: ScrollQuery) -> dict:
        payload = dict(query.body)
        if query.size is not None:
            payload["size"] = query.size
        if query.source is not None:
            payload["_source"] = query.source
        if query.stored_fields is not None:
            payload["stored_fields"] = query.stored_fields
        return payload

    def get_scroll_payload(self, scroll: str, scroll_id: str) -> dict:
        return {"scroll": scroll, "scroll_id": scroll_id}

    def get_clear_scroll_payload(self, scroll_ids: list[str]) -> dict:
        return {"scroll_id": scroll_ids}
