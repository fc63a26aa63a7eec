import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api import members, reports
from .config.settings import settings
from .exceptions import BulkDeleteError, RegistryError
from .middleware.logging import RequestLoggingMiddleware
from .models.database import engine, Base

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Retiree Registry",
    description="Membership registry and PDF listings for a retirees' association",
    version="1.0.0",
)

app.add_middleware(RequestLoggingMiddleware)


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)


@app.exception_handler(BulkDeleteError)
async def bulk_delete_error_handler(request: Request, exc: BulkDeleteError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "failed_id": exc.failed_id, "deleted": exc.deleted},
    )


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure while handling request")
    return JSONResponse(status_code=500, content={"error": "Storage failure"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(
    members.router,
    prefix="/records",
    tags=["Records"],
)
app.include_router(
    reports.router,
    prefix="/reports",
    tags=["Reports"],
)


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
