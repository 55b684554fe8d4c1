# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings, lifespan
from .routers import accounts, blog, health, orders, products, reports, users
from .schemas.common import ValidationErrorResponse

settings = get_settings()

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": error.get("msg", ""),
                "input_value": error.get("input"),
            }
            for error in exc.errors()
        ]
        logger.info(f"Validation failed on {request.method} {request.url.path}: {len(details)} error(s)")
        body = ValidationErrorResponse(
            error="validation_error",
            message="Request validation failed",
            details=details,
        )
        return JSONResponse(status_code=422, content=body.model_dump(mode="json"))

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(orders.router)
    app.include_router(blog.router)
    app.include_router(accounts.router)
    app.include_router(reports.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host=settings.host, port=settings.port, reload=settings.reload)
