"""
    Central Inventory Service API

    This module implements a FastAPI-based microservice that tracks per-SKU stock
    and lets callers reserve units against it without ever overselling, even
    when many reservations for the same SKU arrive at once.

    The service exposes:
    - Inventory endpoints: list, read, create and set stock per SKU
    - Reservation endpoints: atomically reserve stock, list and read reservations
    - Metrics endpoint: Prometheus text exposition of reservation and stock counts
    - Health endpoint: Reports service and database health for orchestration

    The app is built by create_app(), which owns the Database handle for the
    lifetime of the process. serve() hands uvicorn the factory, so importing
    this module builds nothing.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, metrics, schemas, service
from .config import Settings, get_settings
from .database import Database, get_db
from .errors import InventoryServiceError, NotFound
from .seed import seed_inventory

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=schemas.ErrorResponse(
            error=schemas.ErrorDetail(code=code, message=message, details=details)
        ).model_dump(),
    )


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Database handle to use; one is created from settings when omitted
        settings: Service settings; read from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_handle = database or Database(
            settings.database_url,
            busy_timeout=settings.sqlite_busy_timeout,
            pool_size=settings.db_pool_size,
        )
        db_handle.create_all()
        app.state.database = db_handle
        app.state.metrics_registry = metrics.build_registry(db_handle)

        if settings.seed_on_startup:
            db = db_handle.session()
            try:
                seed_inventory(db)
            finally:
                db.close()

        logger.info(f"{settings.service_name} started")
        try:
            yield
        finally:
            db_handle.dispose()
            logger.info(f"{settings.service_name} stopped")

    app = FastAPI(title=f"{settings.service_name}-service", lifespan=lifespan)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    @app.exception_handler(InventoryServiceError)
    async def handle_service_error(request: Request, exc: InventoryServiceError):
        return _error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error_response(400, "INVALID_ARGUMENT", "Malformed request", {"errors": errors})

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return _error_response(500, "STORAGE_FAULT", "Internal storage error")

    @app.get("/health")
    def health(request: Request):
        """
        Health check endpoint for the central inventory service.

        Returns:
            dict: {"status": "ok", "service": ...} when the database answers,
            otherwise a 503 error body.
        """
        if not request.app.state.database.ping():
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "error", "service": settings.service_name,
                         "message": "Database is not available"},
            )
        return {"status": "ok", "service": settings.service_name}

    @app.get("/inventory", response_model=List[schemas.InventoryItem])
    def list_inventory(db: Session = Depends(get_db)):
        """
        List every inventory item ordered by SKU.

        Returns:
            List of {sku, qty} objects
        """
        return crud.get_inventory_items(db)

    @app.get("/inventory/{sku}", response_model=schemas.InventoryItem)
    def get_inventory_item(sku: str, db: Session = Depends(get_db)):
        """
        Get the stock level of a single SKU.

        Raises:
            NotFound: 404 if the SKU does not exist
        """
        db_item = crud.get_inventory_item(db, sku)
        if db_item is None:
            raise NotFound(f"Inventory item '{sku}' not found", {"sku": sku})
        return db_item

    @app.post("/inventory", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
    def create_inventory_item(item: schemas.InventoryItemCreate, db: Session = Depends(get_db)):
        """
        Create a new SKU with an initial stock level.

        Raises:
            InvalidArgument: 400 if the SKU is empty or qty is negative
            SkuAlreadyExists: 409 if the SKU is already stored
        """
        return service.create_inventory_item(db, item.sku, item.qty)

    @app.put("/inventory/{sku}", response_model=schemas.InventoryItem)
    def update_inventory_item(sku: str, item: schemas.InventoryItemUpdate, db: Session = Depends(get_db)):
        """
        Overwrite the stock level of an existing SKU (administrative correction).

        Raises:
            InvalidArgument: 400 if qty is negative
            NotFound: 404 if the SKU does not exist
        """
        return service.set_inventory_quantity(db, sku, item.qty)

    @app.post("/reservations", response_model=schemas.ReservationResult, status_code=status.HTTP_201_CREATED)
    def create_reservation(request_body: schemas.ReservationCreate, db: Session = Depends(get_db)):
        """
        Atomically reserve units of a SKU.

        Returns:
            The new reservation and the stock remaining after it

        Raises:
            InvalidArgument: 400 if sku is empty or qty is below 1
            InvalidSku: 404 if the SKU does not exist
            InsufficientStock: 409 with details.available when stock is short
        """
        reservation, remaining = service.create_reservation(db, request_body.sku, request_body.qty)
        return schemas.ReservationResult(
            reservation=schemas.Reservation.model_validate(reservation),
            remaining_stock=remaining,
        )

    @app.get("/reservations", response_model=List[schemas.Reservation])
    def list_reservations(
        sku: Optional[str] = None,
        skip: int = Query(0, ge=0),
        limit: Optional[int] = Query(None, ge=1),
        db: Session = Depends(get_db),
    ):
        """
        List reservations, newest first, optionally filtered by SKU.

        Args:
            sku: Only return reservations for this SKU
            skip: Number of records to skip (default: 0)
            limit: Maximum number of records to return (default: all)
        """
        return crud.get_reservations(db, sku=sku, skip=skip, limit=limit)

    @app.get("/reservations/{reservation_id}", response_model=schemas.Reservation)
    def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
        db_reservation = crud.get_reservation(db, reservation_id)
        if db_reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found", {"id": reservation_id})
        return db_reservation

    @app.get("/metrics")
    def get_metrics(request: Request):
        """Prometheus text exposition of reservation and stock counts."""
        return Response(
            content=metrics.render_metrics(request.app.state.metrics_registry),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app


def serve() -> None:
    """Run the service with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run("central_inventory.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
