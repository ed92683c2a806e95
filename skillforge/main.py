import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk

from skillforge.ai.gateway import AIServiceError
from skillforge.api.v1.analytics import router as analytics_router
from skillforge.api.v1.ats import router as ats_router
from skillforge.api.v1.github import router as github_router
from skillforge.api.v1.health import router as health_router
from skillforge.api.v1.linkedin import router as linkedin_router
from skillforge.api.v1.resources import router as resources_router
from skillforge.api.v1.resume import router as resume_router
from skillforge.api.v1.roadmap import router as roadmap_router
from skillforge.core.config import settings
from skillforge.core.cors import cors_allow_origin_regex, cors_allowed_origins
from skillforge.core.errors import ApiError, error_body
from skillforge.core.lifespan import lifespan
from skillforge.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="SkillForge Resume API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("api_error path=%s code=%s: %s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


@app.exception_handler(AIServiceError)
async def ai_error_handler(request: Request, exc: AIServiceError):
    logger.error("ai_error path=%s code=%s cause=%r", request.url.path, exc.code, exc.__cause__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("AI_ERROR", "AI analysis failed. Please try again or contact support."),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("INVALID_REQUEST", message))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body("RATE_LIMITED", "Too many requests. Please wait a minute and try again."),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(resume_router, prefix="/api", tags=["Resume"])
app.include_router(ats_router, prefix="/api", tags=["ATS"])
app.include_router(github_router, prefix="/api", tags=["GitHub"])
app.include_router(linkedin_router, prefix="/api", tags=["LinkedIn"])
app.include_router(resources_router, prefix="/api", tags=["Resources"])
app.include_router(roadmap_router, prefix="/api", tags=["Roadmap"])
app.include_router(analytics_router, prefix="/api", tags=["Analytics"])
