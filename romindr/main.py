import asyncio
from contextlib import asynccontextmanager
from datetime import date
from http import HTTPStatus
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError, ValidationException
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from romindr.helpers.cache import get_scheduler
from romindr.helpers.config import CONFIG
from romindr.helpers.logging import logger
from romindr.helpers.monitoring import start_as_current_span
from romindr.helpers.repository import ReminderRepository
from romindr.helpers.scheduler import ReminderScheduler
from romindr.helpers.state import AppState, FixedDateError, ReminderNotFoundError
from romindr.models.error import ErrorInnerModel, ErrorModel
from romindr.models.notification import NotificationRequestModel
from romindr.models.readiness import ReadinessCheckModel, ReadinessEnum, ReadinessModel
from romindr.models.reminder import ReminderUpdateModel, ReminderViewModel

# First log
logger.info(
    "romindr v%s",
    CONFIG.version,
)

# Persistences
_notification = CONFIG.notification.instance
_sound = CONFIG.sound.instance
_store = CONFIG.store.instance

# Application state
_state = AppState(
    feedback=CONFIG.feedback,
    leap_day=CONFIG.recurrence.leap_day,
    notification=_notification,
    repository=ReminderRepository(
        key=CONFIG.store.key,
        store=_store,
    ),
    scheduler=ReminderScheduler(
        config=CONFIG.notification,
        notification=_notification,
    ),
    sound=_sound,
    sound_name=CONFIG.sound.name,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Leave enough time for the longest feedback flag to reset
    close_timeout = (
        max(
            CONFIG.feedback.bounce_sec,
            CONFIG.feedback.confetti_sec,
            CONFIG.feedback.flash_sec,
        )
        + 1
    )
    async with get_scheduler(close_timeout=close_timeout) as scheduler:
        app.state.scheduler = scheduler
        await _state.load()
        yield


# FastAPI
api = FastAPI(
    description="Because love deserves a reminder. Yearly reminders for anniversaries, birthdays and romantic holidays.",
    lifespan=lifespan,
    title="romindr",
    version=CONFIG.version,
)


@api.get("/health/liveness")
@start_as_current_span("health_liveness_get")
async def health_liveness_get() -> None:
    """
    Check if the service is running.

    No parameters are expected.

    Returns a 200 OK if the service is technically running.
    """
    return


@api.get(
    "/health/readiness",
    status_code=HTTPStatus.OK,
)
@start_as_current_span("health_readiness_get")
async def health_readiness_get() -> JSONResponse:
    """
    Check if the service is ready to serve requests.

    No parameters are expected. Services tested are: store, notification, sound.

    Returns a 200 OK if the service is ready to serve requests. If the service is not ready, it should return a 503 Service Unavailable.
    """
    # Check all components in parallel
    (
        store_check,
        notification_check,
        sound_check,
    ) = await asyncio.gather(
        _store.readiness(),
        _notification.readiness(),
        _sound.readiness(),
    )
    readiness = ReadinessModel(
        status=ReadinessEnum.OK,
        checks=[
            ReadinessCheckModel(id="store", status=store_check),
            ReadinessCheckModel(id="notification", status=notification_check),
            ReadinessCheckModel(id="sound", status=sound_check),
        ],
    )
    # If one of the checks fails, the whole readiness fails
    status_code = HTTPStatus.OK
    for check in readiness.checks:
        if check.status != ReadinessEnum.OK:
            readiness.status = ReadinessEnum.FAIL
            status_code = HTTPStatus.SERVICE_UNAVAILABLE
            break
    return JSONResponse(
        content=readiness.model_dump(mode="json"),
        status_code=status_code,
    )


@api.get("/reminders")
@start_as_current_span("reminders_get")
async def reminders_get(today: date | None = None) -> list[ReminderViewModel]:
    """
    List reminders, sorted by upcoming occurrence.

    Optional URL parameters:
    - today: Day to compute occurrences from, defaults to the current day

    Disabled reminders are listed too.
    """
    # Recomputed dates are written back with this day, only their month and day are used afterwards
    return _state.view(today)


@api.get("/reminders/{reminder_id}")
@start_as_current_span("reminder_get")
async def reminder_get(
    reminder_id: UUID,
    today: date | None = None,
) -> ReminderViewModel:
    """
    Get a single reminder.

    Returns a 404 if the reminder does not exist.
    """
    return _view_one(reminder_id, today)


@api.patch("/reminders/{reminder_id}")
@start_as_current_span("reminder_patch")
async def reminder_patch(
    reminder_id: UUID,
    update: ReminderUpdateModel,
    request: Request,
    today: date | None = None,
) -> ReminderViewModel:
    """
    Update a reminder.

    Body fields are optional:
    - is_enabled: Enable or disable the reminder
    - user_date: New date, only for custom reminders

    Returns the updated reminder. Returns a 404 if the reminder does not exist, a 422 if the date of a non-custom reminder is changed.
    """
    if update.user_date:
        await _state.change_date(reminder_id, update.user_date)
    if update.is_enabled is not None:
        await _state.toggle(
            enabled=update.is_enabled,
            reminder_id=reminder_id,
            scheduler=request.app.state.scheduler,
        )
    return _view_one(reminder_id, today)


@api.get("/notifications")
@start_as_current_span("notifications_get")
async def notifications_get() -> list[NotificationRequestModel]:
    """
    List notification registrations held by the notification service.

    Only available with the memory mode, other modes return an empty list.
    """
    return await _notification.pending()


@api.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request,  # noqa: ARG001
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Handle HTTP exceptions and return the error in a standard format.
    """
    return _standard_error(
        message=exc.detail,
        status_code=HTTPStatus(exc.status_code),
    )


@api.exception_handler(ReminderNotFoundError)
async def not_found_exception_handler(
    request: Request,  # noqa: ARG001
    exc: ReminderNotFoundError,
) -> JSONResponse:
    """
    Handle unknown reminders and return the error in a standard format.
    """
    return _standard_error(
        message=str(exc),
        status_code=HTTPStatus.NOT_FOUND,
    )


@api.exception_handler(RequestValidationError)
@api.exception_handler(FixedDateError)
async def validation_exception_handler(
    request: Request,  # noqa: ARG001
    exc: RequestValidationError | FixedDateError,
) -> JSONResponse:
    """
    Handle validation exceptions and return the error in a standard format.
    """
    return _validation_error(exc)


def _view_one(reminder_id: UUID, today: date | None) -> ReminderViewModel:
    for view in _state.view(today):
        if view.id == reminder_id:
            return view
    raise HTTPException(
        detail=f"Reminder {reminder_id} not found",
        status_code=HTTPStatus.NOT_FOUND,
    )


def _validation_error(e: ValidationError | Exception) -> JSONResponse:
    """
    Generate a standard validation error response.
    """
    messages = []
    if isinstance(e, ValidationError) or isinstance(e, ValidationException):
        messages = [
            str(x) for x in e.errors()
        ]  # Pydantic returns well formatted errors, use them
    elif isinstance(e, ValueError):
        messages = [str(e)]
    return _standard_error(
        details=messages,
        message="Validation error",
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
    )


def _standard_error(
    message: str,
    status_code,
    details: list[str] | None = None,
) -> JSONResponse:
    """
    Generate a standard error response.
    """
    model = ErrorModel(
        error=ErrorInnerModel(
            details=details or [],
            message=message,
        )
    )
    return JSONResponse(
        content=model.model_dump(mode="json"),
        status_code=status_code,
    )
