"""FastAPI application entrypoint."""

from dotenv import load_dotenv
from fastapi import FastAPI

from leadflow.adapters.inbound.http.errors import register_exception_handlers
from leadflow.adapters.inbound.http.routes import router
from leadflow.infrastructure.wiring.container import close_container

# Load environment variables from .env file
load_dotenv()

app = FastAPI(
    title="LeadFlow",
    description="Lead lifecycle and processing handoff service using Clean Architecture",
    version="0.1.0",
)

register_exception_handlers(app)
app.include_router(router)


@app.on_event("shutdown")
async def shutdown() -> None:
    """Close outbound connections."""
    await close_container()
