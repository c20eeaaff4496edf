from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn

from app.core.config import settings
from app.core.database import create_db_and_tables, close_db
from app.core.logging import setup_logging
from app.middleware.logging_middleware import LoggingMiddleware, StructlogMiddleware
from app.controllers import product_controller

logger = setup_logging()

docs_enabled = settings.environment == "local"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting products API", environment=settings.environment, api_prefix=settings.api_prefix)
    await create_db_and_tables()
    yield
    await close_db()
    logger.info("Products API stopped")


app = FastAPI(
    title="Shopping List Products API",
    description="Products of shared shopping lists, grouped by category",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

# LoggingMiddleware is outermost so StructlogMiddleware binds the same request id.
app.add_middleware(StructlogMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(product_controller.router, prefix=settings.api_prefix)


def error_response(status_code: int, message, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "success": False, "status_code": status_code},
        headers=headers,
    )


@app.get("/")
async def root():
    return {
        "service": "shopping-list-products",
        "version": app.version,
        "environment": settings.environment,
        "products_url": f"{settings.api_prefix}/products",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning("Request rejected", status_code=exc.status_code, detail=exc.detail)
    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception", error=str(exc), error_type=type(exc).__name__)
    return error_response(500, "Internal server error")


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=docs_enabled,
        log_config=None
    )
