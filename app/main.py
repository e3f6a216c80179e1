import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.http_hardening import install_http_hardening
from app.services.query_errors import QueryError
from app.api.faith.search import router as faith_search_router
from app.api.faith.router import router as faith_router
from app.api.habits.habits import router as habits_router
from app.api.settings.router import router as settings_router

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_http_hardening(app)


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


app.include_router(faith_search_router, prefix="/api/faith")
app.include_router(faith_router, prefix="/api/faith")
app.include_router(habits_router, prefix="/api/habits")
app.include_router(settings_router, prefix="/api/settings")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
