from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.db import init_db
from .core.logging import configure_logging
from .api.routes_briefs import router as briefs_router
from .api.routes_caa import router as caa_router
from .api.routes_media import router as media_router
from .api.routes_collab import router as collab_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_TABLES:
        init_db()
    yield


app = FastAPI(title="BriefBoarder API", lifespan=lifespan)

# CORS:
# - In prod, FRONTEND_ORIGIN is required and we never fall back to "*".
# - In non-prod, wide-open CORS is only enabled if CORS_ALLOW_ALL_ORIGINS=True.
if settings.ENV.lower() == "prod":
    if not settings.FRONTEND_ORIGIN:
        raise RuntimeError(
            "FRONTEND_ORIGIN must be set in production – refusing to start with wide-open CORS."
        )
    origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()]
elif settings.CORS_ALLOW_ALL_ORIGINS or not settings.FRONTEND_ORIGIN:
    origins = ["*"]
else:
    origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False,
)


def validation_message(exc: RequestValidationError) -> str:
    """First validation error as a single human-readable sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    err = errors[0]
    loc = [str(p) for p in err.get("loc", ()) if p != "body"]
    field = loc[-1] if loc else "body"

    if err.get("type") == "missing":
        return f"{field} is required"
    if err.get("type") == "json_invalid":
        return "Request body is not valid JSON"

    msg = str(err.get("msg", "Invalid request"))
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    return f"{field}: {msg}" if loc else msg


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": validation_message(exc)})


app.include_router(briefs_router, prefix=settings.API_PREFIX)
app.include_router(caa_router, prefix=settings.API_PREFIX)
app.include_router(media_router, prefix=settings.API_PREFIX)
app.include_router(collab_router, prefix=settings.API_PREFIX)
