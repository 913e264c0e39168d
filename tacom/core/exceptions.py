import logging
from typing import List, Optional

from fastapi.exceptions import RequestValidationError
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TacomError(Exception):
    """Base class for domain errors raised by the services."""


class FieldValidationError(TacomError):
    """A request field is missing or invalid; reported as 422 with the field name."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class MovementValidationError(FieldValidationError):
    """A movement request is missing a required field or has an invalid combination."""


class NotFoundError(TacomError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class EquipmentNotFound(NotFoundError):
    def __init__(self, equipment_id: str):
        super().__init__("equipment", equipment_id)


class ConflictError(TacomError):
    pass


class PersistenceError(TacomError):
    """A repository write failed part-way through a movement batch.

    Equipment listed in ``committed`` keep their movement and update; the
    failed unit and everything after it were not written.
    """

    def __init__(
        self,
        failed_equipment_id: str,
        committed: Optional[List[str]] = None,
        pending: Optional[List[str]] = None,
    ):
        super().__init__(f"failed to persist movement for equipment {failed_equipment_id}")
        self.failed_equipment_id = failed_equipment_id
        self.committed = list(committed or [])
        self.pending = list(pending or [])


def register_exception_handlers(app):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.info("HTTP exception", extra={"status_code": exc.status_code})
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error", extra={"errors": exc.errors()})
        return JSONResponse({"error": "Validation error", "details": exc.errors()}, status_code=422)

    @app.exception_handler(FieldValidationError)
    async def field_validation_handler(request: Request, exc: FieldValidationError):
        logger.info("Request rejected", extra={"field": exc.field, "kind": type(exc).__name__})
        return JSONResponse({"error": exc.message, "field": exc.field}, status_code=422)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse({"error": str(exc)}, status_code=409)

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error(
            "Movement batch aborted",
            extra={"failed": exc.failed_equipment_id, "committed": len(exc.committed)},
        )
        return JSONResponse(
            {
                "error": "Failed to persist movement",
                "failed_equipment_id": exc.failed_equipment_id,
                "committed": exc.committed,
                "pending": exc.pending,
            },
            status_code=500,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse({"error": "Internal server error"}, status_code=500)
