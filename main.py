from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.identity.api.router import router as auth_router, users_router, roles_router
from apps.catalog.api.router import router as product_router

# Initialize logging configuration
LogConfig.setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} starting ({settings.APP_ENV})")
    yield
    await DatabaseManager.shutdown()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)

# Mount routers (prefixes from config)
app.include_router(auth_router, prefix=settings.API_V1_AUTH_PREFIX, tags=["Auth"])
app.include_router(users_router, prefix=settings.API_V1_USERS_PREFIX, tags=["Users"])
app.include_router(roles_router, prefix=settings.API_V1_ROLES_PREFIX, tags=["Roles"])
app.include_router(product_router, prefix=settings.API_V1_PRODUCTS_PREFIX, tags=["Products"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
