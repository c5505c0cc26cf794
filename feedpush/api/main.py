import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from feedpush.api.auth import verify_token
from feedpush.api.routers import articles, board, categories, users
from feedpush.config import api_token
from feedpush.db.session import init_db
from feedpush.errors import DataUnavailableError, PushProviderError

logger = logging.getLogger(__name__)

# No OpenAPI docs when auth is active
_token_set = api_token() is not None
app = FastAPI(
    title="feedpush",
    version="0.1.0",
    docs_url=None if _token_set else "/docs",
    redoc_url=None if _token_set else "/redoc",
    openapi_url=None if _token_set else "/openapi.json",
)

_auth = [Depends(verify_token)]

app.include_router(board.router, prefix="/api/board", tags=["board"], dependencies=_auth)
app.include_router(users.router, prefix="/api/users", tags=["users"], dependencies=_auth)
app.include_router(articles.router, prefix="/api/articles", tags=["articles"], dependencies=_auth)
app.include_router(categories.router, prefix="/api/categories", tags=["categories"], dependencies=_auth)


@app.on_event("startup")
def startup():
    init_db()


@app.exception_handler(DataUnavailableError)
async def data_unavailable_handler(request: Request, exc: DataUnavailableError):
    # Already logged where the query failed
    return JSONResponse(status_code=503, content={"detail": "Data unavailable"})


@app.exception_handler(PushProviderError)
async def push_provider_handler(request: Request, exc: PushProviderError):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "topic": exc.topic})


@app.get("/api/health", dependencies=_auth)
def health():
    return {"status": "ok"}
