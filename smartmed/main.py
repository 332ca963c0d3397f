from fastapi import FastAPI

from smartmed.core.config import get_settings
from smartmed.core.logging import configure_logging
from smartmed.api.v1.router import api_router

settings = get_settings()

configure_logging(settings.log_level, json_output=settings.log_json)

app = FastAPI(
    title="SmartMed Dashboard Backend",
)


@app.get("/health", tags=["health"])
async def root_health() -> dict:
    """
    Global health check endpoint.
    """
    return {"status": "ok"}


# Mount versioned API router
app.include_router(api_router, prefix=settings.api_v1_prefix)
