"""Environment-backed configuration for the scroll export bridge.

Keys read across the project:
    SCROLL_KEEP_ALIVE        Cursor keep-alive when a query names none ("10m").
    SCROLL_PAGE_SIZE         Hits per page for the export surfaces (1000).
    SCROLL_OPTIONAL_FIELDS   Hit metadata merged into records, e.g. "[_id,_score]".
    SEARCH_ENGINES           Search backends to instantiate, e.g. "[elasticsearch]".
    SEARCH_TIMEOUT           Request timeout of the search clients in seconds.
    SEARCH_<ENGINE>_<KEY>    Per-backend settings (BASE_URL, INDEX, API_KEY, ...).
    APP_API_KEY              Key expected in the X-API-Key header of /export.
"""

import logging
import os


class HelperConfig:
    """Typed readers over environment variables. Keys are case-insensitive."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _read(self, key: str, default) -> str | None:
        # unset and empty are both "missing"
        raw = os.getenv(key.upper()) or None
        if raw is None and default is None:
            raise ValueError(f"Environment variable '{key.upper()}' is not set.")
        return raw

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string setting, e.g. SEARCH_ELASTICSEARCH_BASE_URL.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        raw = self._read(key, default)
        return raw.strip() if raw is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric setting such as SCROLL_PAGE_SIZE or SEARCH_TIMEOUT.

        Values without a decimal point are returned as int, so page sizes stay integral.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                or if the value is not a number.
        """
        raw = self._read(key, default)
        if raw is None:
            return default
        try:
            return int(raw) if "." not in raw else float(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key.upper()}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean setting. "true", "1" and "yes" count as True.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        raw = self._read(key, default)
        if raw is None:
            return default
        return raw.lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Read a bracketed list setting, e.g. SCROLL_OPTIONAL_FIELDS="[_id,_score]".

        Blank elements are dropped, so "[]" and "[_id,]" are valid.

        Args:
            key (str): Environment variable name.
            default (list[str] | None): Returned when the variable is not set.
            separator (str): The delimiter between elements.
            element_type (type): The type each element is cast to.

        Returns:
            list: The parsed elements.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                if the value is not bracketed, or if an element cannot be cast.
        """
        raw = self._read(key, default)
        if raw is None:
            return default
        raw = raw.strip()
        if not raw.startswith("[") or not raw.endswith("]"):
            raise ValueError(f"Environment variable '{key.upper()}' must be in the format '[elem1{separator}elem2{separator}...]'. Got: '{raw}'")
        elements = [v.strip() for v in raw[1:-1].split(separator) if v.strip()]
        try:
            return [element_type(elem) for elem in elements]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key.upper()}' contains invalid elements: {e}. Type set to {element_type.__name__}. Got: '{raw}'")

    def get_logger(self) -> logging.Logger:
        """Return the application logger shared by clients, streams and routers."""
        return self._logger
