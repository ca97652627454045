"""FastAPI application entry point for the scroll export API."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from server.api.routers.ExportRouter import export_router
from escroll.clients.search.SearchClientManager import SearchClientManager
from escroll.helper.HelperConfig import HelperConfig
from escroll.logging.logging_setup import setup_logging

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown."""
    app.state.logging = logging
    app.state.config = HelperConfig(logger=app.state.logging)

    # Initialise the search client
    search_client = SearchClientManager(helper_config=app.state.config).get_client()
    await search_client.boot()
    await search_client.do_healthcheck()
    app.state.search_client = search_client

    app.state.logging.info("Scroll export API ready (engine: %s).", search_client.get_engine_name())
    yield

    # Shutdown
    await search_client.close()
    app.state.logging.info("Scroll export API shut down.")


app = FastAPI(
    title="Elasticsearch Scroll Export",
    description="Streams every hit of a scroll query as newline-delimited JSON.",
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(export_router)


# Server Start
if __name__ == "__main__":
    import uvicorn
    logging.info(f"Starting scroll export API v{app_version} on port 8000...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
