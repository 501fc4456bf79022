"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.config import get_settings
from catalog_api.database import Database, get_database
from catalog_api.errors import StoreError
from catalog_api.api import categories, products
from catalog_api.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Ruta no encontrada"
INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.database = Database.from_settings(settings)
    logger.info(f"Servidor API REST corriendo en http://{settings.HOST}:{settings.PORT}")

    yield

    await app.state.database.dispose()
    logger.info("Connection pool closed")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)


# Last-resort handler for anything a route didn't handle itself
@app.middleware("http")
async def catch_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"Error interno en {request.method} {request.url.path}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render handler errors as {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and path ids answer 400"""
    error_messages = []
    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"])
        error_messages.append(f"{field}: {error['msg']}")

    logger.debug(f"Validation error on {request.method} {request.url.path}: {error_messages}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Solicitud inválida", "errors": error_messages},
    )


# Include routers
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check(database: Database = Depends(get_database)):
    try:
        await database.ping()
    except StoreError as e:
        logger.warning(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"},
        )
    return {"status": "healthy"}


# Non-preflight OPTIONS; preflights are answered by the CORS middleware
@app.options("/{path:path}", include_in_schema=False)
async def options_no_content(path: str):
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Registered last: any method/path no route above fully matched
@app.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"],
    include_in_schema=False,
)
async def route_not_found(path: str):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": ROUTE_NOT_FOUND_MESSAGE},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "catalog_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
