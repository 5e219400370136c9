import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import create_tables, async_session
from app.dependencies import verify_api_key
from app.seed import seed_data
from app.routers.auth import router as auth_router
from app.routers.vehicles import router as vehicles_router, admin_router as admin_vehicles_router
from app.routers.entries import router as entries_router
from app.routers.admin_entries import router as admin_entries_router
from app.routers.users import router as users_router
from app.utils.exceptions import register_exception_handlers
from app.utils.log import RequestLogMiddleware, configure_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "fleet-log-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    os.makedirs(os.path.join(settings.data_dir, settings.photo_bucket), exist_ok=True)
    await create_tables()
    async with async_session() as session:
        await seed_data(session)
    logger.info("%s %s started", SERVICE_NAME, VERSION)
    yield
    logger.info("%s shutting down", SERVICE_NAME)


app = FastAPI(
    title="Fleet Log API",
    description="Vehicle condition logging for fleet drivers and administrators",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

app.include_router(auth_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(vehicles_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(entries_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(admin_entries_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(users_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(admin_vehicles_router, prefix="/api/v1", dependencies=_api_key_dep)

# published photo URLs resolve here
app.mount(
    f"/media/{settings.photo_bucket}",
    StaticFiles(directory=os.path.join(settings.data_dir, settings.photo_bucket), check_dir=False),
    name="media",
)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": SERVICE_NAME, "version": VERSION}, "message": None}
