import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lms_backend.api.auth import auth_router
from lms_backend.api.categories import category_router
from lms_backend.api.courses import course_router
from lms_backend.database import get_engine
from lms_backend.model.base import Base
from lms_backend.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):

    if settings.DEBUG_MODE == "development":
        # local runs without a migrated database
        Base.metadata.create_all(bind=get_engine())
        logger.info("Created missing tables")

    yield

app = FastAPI(lifespan=lifespan)

origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(
    auth_router,
    prefix="/auth",
    tags=["authentication"]
)

app.include_router(
    course_router,
    prefix="/courses",
    tags=["courses"]
)

app.include_router(
    category_router,
    prefix="/categories",
    tags=["categories"]
)

@app.head("/", status_code=204)
def get_status_head():
    return
