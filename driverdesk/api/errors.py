"""Maps domain errors to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from driverdesk.domain import errors

STATUS_BY_ERROR: dict[type[errors.DomainError], int] = {
    errors.NotVerified: status.HTTP_403_FORBIDDEN,
    errors.InsufficientBalance: status.HTTP_403_FORBIDDEN,
    errors.DriverOffline: status.HTTP_409_CONFLICT,
    errors.MissingField: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.InvalidDepositAmount: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.InvalidRating: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.AlreadyHasActiveTrip: status.HTTP_409_CONFLICT,
    errors.InvalidStateTransition: status.HTTP_409_CONFLICT,
    errors.DepositAlreadySettled: status.HTTP_409_CONFLICT,
    errors.ProfileLocked: status.HTTP_409_CONFLICT,
    errors.TripNotFound: status.HTTP_404_NOT_FOUND,
    errors.DriverNotFound: status.HTTP_404_NOT_FOUND,
    errors.DepositNotFound: status.HTTP_404_NOT_FOUND,
    errors.PersistenceUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def domain_error_handler(request: Request, exc: errors.DomainError) -> JSONResponse:
    body = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, errors.MissingField):
        body["fields"] = exc.fields
    elif isinstance(exc, errors.AlreadyHasActiveTrip):
        body["active_trip_id"] = exc.active_trip_id
    return JSONResponse(
        status_code=STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST),
        content=body,
    )
