"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import blackjack, progress, solitaire
from config import config
from core.errors import InvariantViolation

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _invariant_violation_handler(request: Request, exc: InvariantViolation) -> JSONResponse:
    """Report a corrupted table instead of serving it."""
    logger.error("Invariant violated on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Game state is corrupted"})


app = FastAPI(
    title="Card Arcade",
    description="Blackjack and Klondike solitaire with shared player progress",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(InvariantViolation, _invariant_violation_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(blackjack.router, prefix="/api/blackjack", tags=["blackjack"])
app.include_router(solitaire.router, prefix="/api/solitaire", tags=["solitaire"])
app.include_router(progress.router, prefix="/api/progress", tags=["progress"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=config.host, port=config.port, reload=config.debug)
