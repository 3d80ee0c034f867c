"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from diet_tracker.api.foods import router as foods_router
from diet_tracker.api.meals import router as meals_router
from diet_tracker.app_logging import configure_logging
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import (
    CollisionError,
    FoodInUseError,
    InconsistencyError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(foods_router)
    app.include_router(meals_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        code = (
            status.HTTP_409_CONFLICT
            if isinstance(exc, CollisionError | FoodInUseError)
            else 422
        )
        return JSONResponse(status_code=code, content={"error": exc.to_dict()})

    @app.exception_handler(NotFoundError)
    async def not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": {"entity": exc.entity, "message": str(exc)}},
        )

    @app.exception_handler(InconsistencyError)
    async def inconsistency(_: Request, __: InconsistencyError) -> JSONResponse:
        # MealAggregator logs the fault where it is detected.
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"message": "Stored meal data is inconsistent."}},
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(
        request: Request, exc: StoreUnavailableError
    ) -> JSONResponse:
        logger.error(
            "Store unavailable", exc_info=exc, extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": {"message": "The database is unavailable."}},
        )

    return app
