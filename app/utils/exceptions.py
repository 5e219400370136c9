import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    title = "Error"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code

    @property
    def code(self) -> str:
        return type(self).__name__


class MissingRequiredField(AppException):
    title = "Missing Information"

    def __init__(self, message: str = "Please select a vehicle and enter the mileage"):
        super().__init__(message, status_code=400)


class InvalidMileage(AppException):
    title = "Invalid Mileage"

    def __init__(self, message: str = "Mileage must be a whole number of zero or more"):
        super().__init__(message, status_code=400)


class MissingRequiredPhoto(AppException):
    title = "Missing Photos"

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Please take all four required photos (missing: {', '.join(missing)})",
            status_code=400,
        )


class InvalidPhotoFile(AppException):
    title = "Invalid Photo"

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NetworkUnavailable(AppException):
    title = "Connection Problem"

    def __init__(self, message: str = "The service is unreachable, nothing was saved. Please try again later"):
        super().__init__(message, status_code=503)


class AuthenticationFailed(AppException):
    title = "Login Failed"

    def __init__(self):
        super().__init__("Invalid username or password", status_code=401)


class PhotoPersistFailure(AppException):
    title = "Upload Failed"

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class DuplicateUsername(AppException):
    title = "Username Taken"

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' already exists", status_code=409)


class DuplicateLicensePlate(AppException):
    title = "License Plate Taken"

    def __init__(self, plate: str):
        super().__init__(f"A vehicle with license plate '{plate}' already exists", status_code=409)


class ReferentialDeleteConflict(AppException):
    title = "Delete Failed"

    def __init__(self, message: str):
        super().__init__(message, status_code=409)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        logger.info("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, data={"code": exc.code, "title": exc.title}),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
