from abc import abstractmethod

from escroll.clients.ClientInterface import ClientInterface
from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.helper.HelperConfig import HelperConfig


class SearchClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "search"
        """
        return "search"

    @abstractmethod
    def get_default_index(self) -> str | None:
        """
        Returns the index searched when a query does not name one.

        Returns:
            str | None: The configured index, or None to search all indices.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_search(self, index: str | None) -> str:
        """
        Returns the endpoint path for the initial search of a scroll.

        Args:
            index (str | None): The index to search, None for all indices.

        Returns:
            str: The endpoint path (e.g. "/my-index/_search")
        """
        pass

    @abstractmethod
    def _get_endpoint_scroll(self) -> str:
        """
        Returns the endpoint path for scroll continuation requests.

        Returns:
            str: The endpoint path (e.g. "/_search/scroll")
        """
        pass

    @abstractmethod
    def _get_endpoint_clear_scroll(self) -> str:
        """
        Returns the endpoint path for releasing scroll contexts.

        Returns:
            str: The endpoint path (e.g. "/_search/scroll")
        """
        pass

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    @abstractmethod
    def get_search_params(self, query: ScrollQuery) -> dict:
        """
        Returns the URL query parameters of the initial search.

        Args:
            query (ScrollQuery): The scroll query.

        Returns:
            dict: The query parameters, at least carrying the keep-alive duration.
        """
        pass

    @abstractmethod
    def get_search_payload(self, query: ScrollQuery) -> dict:
        """
        Returns the request body of the initial search.

        Args:
            query (ScrollQuery): The scroll query.

        Returns:
            dict: The request body.
        """
        pass

    @abstractmethod
    def get_scroll_payload(self, scroll: str, scroll_id: str) -> dict:
        """
        Returns the request body of a scroll continuation.

        Args:
            scroll (str): Keep-alive duration for the cursor.
            scroll_id (str): Continuation token of the previous page.

        Returns:
            dict: The request body.
        """
        pass

    @abstractmethod
    def get_clear_scroll_payload(self, scroll_ids: list[str]) -> dict:
        """
        Returns the request body for releasing scroll contexts.

        Args:
            scroll_ids (list[str]): The continuation tokens to release.

        Returns:
            dict: The request body.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_search(self, query: ScrollQuery) -> dict:
        """Issue the initial search of a scroll query.

        Args:
            query (ScrollQuery): The scroll query. Its scroll duration must be set.

        Returns:
            dict: The raw response body, including "_scroll_id".
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_search_payload(query),
            params=self.get_search_params(query),
            endpoint=self._get_endpoint_search(query.index or self.get_default_index()),
            raise_on_error=True,
        )
        return resp.json()

    async def do_scroll(self, scroll: str, scroll_id: str) -> dict:
        """Fetch the next page of an open scroll.

        Args:
            scroll (str): Keep-alive duration, renewed with every call.
            scroll_id (str): Continuation token of the previous page.

        Returns:
            dict: The raw response body, same shape as do_search().
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_scroll_payload(scroll, scroll_id),
            endpoint=self._get_endpoint_scroll(),
            raise_on_error=True,
        )
        return resp.json()

    async def do_clear_scroll(self, scroll_ids: list[str]) -> dict:
        """Release server-side scroll contexts.

        Args:
            scroll_ids (list[str]): The continuation tokens to release.

        Returns:
            dict: The acknowledgement body (e.g. {"succeeded": true, "num_freed": 1}).
        """
        resp = await self.do_request(
            method="DELETE",
            json=self.get_clear_scroll_payload(scroll_ids),
            endpoint=self._get_endpoint_clear_scroll(),
            raise_on_error=True,
        )
        return resp.json()
