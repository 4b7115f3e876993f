import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from lead_router import __version__
from lead_router.api.v1.router import router as api_v1_router
from lead_router.core.config import settings
from lead_router.core.database import engine
from lead_router.core.exceptions import (
    AssigneeNotFoundError,
    LeadNotFoundError,
    LeadRouterError,
    RoutingRuleNotFoundError,
)
from lead_router.core.rate_limit import limiter

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Routing engine starting (fallthrough_on_unresolved=%s, tenant_lock=%s)",
        settings.ROUTING_FALLTHROUGH_ON_UNRESOLVED,
        settings.ROUTING_TENANT_LOCK_ENABLED,
    )
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="Lead Routing & Assignment Engine",
    description="Rule-based routing of real-estate CRM leads to sales agents",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


# ---------------------------------------------------------------------------
# Error handlers: one per domain error, most specific first
# ---------------------------------------------------------------------------


@app.exception_handler(LeadNotFoundError)
async def lead_not_found_handler(request: Request, exc: LeadNotFoundError):
    logger.warning("Lead not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "lead_not_found"},
    )


@app.exception_handler(AssigneeNotFoundError)
async def assignee_not_found_handler(request: Request, exc: AssigneeNotFoundError):
    logger.warning("Routing resolved an unknown assignee: %s", exc.detail)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.detail, "type": "assignee_not_found"},
    )


@app.exception_handler(RoutingRuleNotFoundError)
async def routing_rule_not_found_handler(request: Request, exc: RoutingRuleNotFoundError):
    logger.warning("Routing rule not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "routing_rule_not_found"},
    )


@app.exception_handler(LeadRouterError)
async def routing_error_handler(request: Request, exc: LeadRouterError):
    logger.warning("Routing error on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "routing_error"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures (database errors included) and hide the trace."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
