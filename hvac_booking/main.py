from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

load_dotenv()

from .config import Settings, settings as default_settings
from .errors import BookingError, ValidationError
from .notifications.mailer import Notifier, SmtpNotifier
from .scheduling.slots import SlotCatalog, normalize_date
from .scheduling.workflow import BookingService, BookingStatus
from .schemas import AvailabilityResponse, BookingRequest, BookingResponse, HealthResponse
from .store import BookingStore, InMemoryBookingStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

FAILURE_STATUSES = {
    BookingStatus.RESERVED_INVITE_FAILED,
    BookingStatus.RESERVED_DELIVERY_FAILED,
}


def get_store(request: Request) -> BookingStore:
    return request.app.state.store


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BookingStore] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    settings = settings or default_settings
    if store is None:
        store = InMemoryBookingStore(SlotCatalog(settings.slot_policy))
    elif store.catalog.policy != settings.slot_policy:
        logger.warning(
            f"Store catalog policy {store.catalog.policy!r} overrides SLOT_POLICY={settings.slot_policy!r}"
        )
    notifier = notifier or SmtpNotifier(settings)

    if not settings.mail_configured:
        logger.warning("⚠️ EMAIL_USER and EMAIL_PASS environment variables are not set.")

    app = FastAPI(title="HVAC Booking API")
    app.state.settings = settings
    app.state.store = store
    app.state.booking_service = BookingService(store, notifier, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(400, "Invalid request body")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Server error: {exc}")
        return _error_response(500, "Server error")

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "HVAC backend is running"

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse()

    @app.get("/availability", response_model=AvailabilityResponse)
    def availability(
        date: Optional[str] = None,
        store: BookingStore = Depends(get_store),
    ) -> AvailabilityResponse:
        if not date or not date.strip():
            raise ValidationError("Missing date")
        day = normalize_date(date)
        return AvailabilityResponse(date=day, available=store.available(day))

    @app.post("/book", response_model=BookingResponse)
    def book(
        payload: BookingRequest,
        service: BookingService = Depends(get_booking_service),
    ):
        outcome = service.book(payload)
        if outcome.status in FAILURE_STATUSES:
            return _error_response(500, outcome.detail)
        return BookingResponse(success=True, message=outcome.detail)

    return app


app = create_app()
