from pydantic import BaseModel, ConfigDict, Field


class ExportRequest(BaseModel):
    """Body of an NDJSON export request."""

    model_config = ConfigDict(populate_by_name=True)

    index: str | None = None
    query: dict = {"match_all": {}}
    sort: list | None = None
    size: int | None = None
    scroll: str | None = None
    source: bool | list[str] | None = Field(default=None, alias="_source")
    optional_fields: list[str] | None = None
