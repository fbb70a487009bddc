import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import commands, health, sessions
from .api.commands import status_for
from .config import settings
from .core.errors import LaunchpadError
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Launchpad DEX API",
    description="Plans Uniswap V2 pool, liquidity and swap transactions as signable sessions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # The signing page is served from another origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LaunchpadError)
async def launchpad_error_handler(request: Request, exc: LaunchpadError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} failed ({exc.category.value}): {exc.message}")
    return JSONResponse(
        status_code=status_for(exc.category.value),
        content={"success": False, "error": exc.to_dict()},
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(sessions.router, tags=["Sessions"])
app.include_router(commands.router, tags=["Commands"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Launchpad DEX API",
        "version": __version__,
        "docs": "/docs",
        "health": "/healthz",
        "commands": "/commands",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "launchpad.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
