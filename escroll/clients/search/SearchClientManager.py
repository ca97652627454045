from escroll.helper.HelperConfig import HelperConfig
from escroll.clients.search.SearchClientInterface import SearchClientInterface


class SearchClientManager:
    """
    Manager class to handle the search clients named in the configuration.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.clients = self._initialize_clients()

    def _get_engines_from_env(self) -> list[str]:
        """
        Reads the list of search engines from ENV configuration.

        Returns:
            list[str]: A list of search engine names, capitalized (e.g. "Elasticsearch").

        Raises:
            ValueError: If no search engines are specified in the configuration.
        """
        engines = self.helper_config.get_list_val("SEARCH_ENGINES")
        if not engines:
            raise ValueError("No search engines specified in configuration.")

        return [engine.strip().lower().capitalize() for engine in engines]

    def _initialize_clients(self) -> list[SearchClientInterface]:
        """
        Initializes search clients based on the engines specified in the configuration.

        Returns:
            list[SearchClientInterface]: The instantiated search clients.

        Raises:
            ValueError: If an engine is unsupported or no client could be instantiated.
        """
        clients = []
        for engine in self._get_engines_from_env():
            className = f"SearchClient{engine}"
            try:
                module = __import__(
                    f"escroll.clients.search.{engine.lower()}.{className}",
                    fromlist=[className],
                )
                client_class = getattr(module, className)
                clients.append(client_class(helper_config=self.helper_config))
                self.logging.debug(f"Instantiated search client for engine: {engine}")
            except (ImportError, AttributeError) as e:
                raise ValueError(f"Unsupported search engine specified: '{engine}'. Error: {e}")
        if not clients:
            raise ValueError("No valid search clients could be instantiated from the specified engines.")
        return clients

    def get_client(self) -> SearchClientInterface:
        """
        Returns the first configured search client, used for single-backend exports.

        Returns:
            SearchClientInterface: The primary search client.
        """
        return self.clients[0]
