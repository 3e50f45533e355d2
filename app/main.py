import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import (
    grading_router,
    submissions_router,
    system_router,
    violations_router,
)
from .settings import APP_DESCRIPTION, APP_TITLE, APP_VERSION, CORS_ALLOW_ORIGINS, RUNNER_URL
from .state import close_state, init_state

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title=APP_TITLE,
    version=APP_VERSION,
    description=APP_DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Thiếu/sai field trong body => 400 (không phải 422 mặc định của FastAPI).
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {APP_TITLE} v{APP_VERSION}...")
    logger.info(f"Remote runner: {RUNNER_URL}")
    init_state(app)
    logger.info("Startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    close_state(app)


app.include_router(grading_router)
app.include_router(submissions_router)
app.include_router(violations_router)
app.include_router(system_router)


__all__ = ["app"]
