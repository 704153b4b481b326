from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from dynaform import __version__
from dynaform.api import form_fields, users, health
from dynaform.db.database import create_tables, dispose_engine, session_scope
from dynaform.core.config import settings, logger
from dynaform.core.middleware import (
    RequestContextMiddleware,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from dynaform.services.seeding import seed_form_fields


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await create_tables()
    if settings.SEED_ON_STARTUP:
        try:
            async with session_scope() as db:
                await seed_form_fields(db)
        except Exception:
            # The API stays usable without sample data
            logger.exception("Seeding form fields failed")
    yield
    # Shutdown
    await dispose_engine()


app = FastAPI(
    title="Dynamic Form API",
    description="Field definitions and form submissions for dynamic forms",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Routers are mounted both at the root and under /api, which is where form
# clients point by default.
for prefix, in_schema in (("", True), ("/api", False)):
    app.include_router(form_fields.router, prefix=f"{prefix}/form-fields", tags=["Form Fields"], include_in_schema=in_schema)
    app.include_router(users.router, prefix=f"{prefix}/users", tags=["Users"], include_in_schema=in_schema)

app.include_router(health.router, prefix="", tags=["Health"])
