import datetime
import logging
from contextlib import asynccontextmanager
from datetime import timezone

from bson import ObjectId
from fastapi import FastAPI, Request, status
from fastapi.encoders import ENCODERS_BY_TYPE
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from myknowledge import dependencies
from myknowledge.config import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, APP_SERVER_HOST, APP_SERVER_PORT, LOG_LEVEL
)
from myknowledge.notes.routes import router as notes_router
from myknowledge.journals.routes import router as journals_router
from myknowledge.tags.routes import router as tags_router
from myknowledge.users.routes import router as users_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Add a custom encoder for ObjectId to FastAPI's internal dictionary
ENCODERS_BY_TYPE[ObjectId] = str


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    logger.info(f"[{datetime.datetime.now(timezone.utc).isoformat()}] [LIFESPAN] App startup...")
    await dependencies.mongo_manager.initialize_db()
    logger.info(f"[{datetime.datetime.now(timezone.utc).isoformat()}] [LIFESPAN] App startup complete.")
    yield
    logger.info(f"[{datetime.datetime.now(timezone.utc).isoformat()}] [LIFESPAN] App shutdown sequence initiated...")
    await dependencies.close_user_service()
    dependencies.mongo_manager.close()
    logger.info(f"[{datetime.datetime.now(timezone.utc).isoformat()}] [LIFESPAN] App shutdown complete.")


app = FastAPI(title=APP_NAME, version=APP_VERSION, description=APP_DESCRIPTION, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Every error leaves the API as {"error": ..., "details"?: ...}
    content = exc.detail if isinstance(exc.detail, dict) else {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()) if part != 'body')}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details}
    )


app.include_router(notes_router)
app.include_router(journals_router)
app.include_router(tags_router)
app.include_router(users_router)


@app.get("/", tags=["General"])
async def root():
    return {"message": f"{APP_NAME} Operational."}


@app.get("/api/health", tags=["General"])
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/info", tags=["General"])
async def info():
    return {"name": APP_NAME, "version": APP_VERSION, "description": APP_DESCRIPTION}


if __name__ == "__main__":
    import uvicorn
    log_config = uvicorn.config.LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s %(levelname)s %(client_addr)s - "[MYKNOWLEDGE_ACCESS] %(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = '%(asctime)s %(levelname)s [%(name)s] [MYKNOWLEDGE_DEFAULT] %(message)s'
    uvicorn.run("myknowledge.app:app", host=APP_SERVER_HOST, port=APP_SERVER_PORT, lifespan="on", reload=False, workers=1, log_config=log_config)
