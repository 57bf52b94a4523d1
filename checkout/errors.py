from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

EMAIL_REQUIRED = "Email is required"


class ApiError(Exception):
    """Error returned to the client as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = exc.body
    if not isinstance(body, dict) or not body.get("email"):
        message = EMAIL_REQUIRED
    else:
        message = "Invalid request"
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first["loc"] if part != "body")
            message = f"{location}: {first['msg']}" if location else first["msg"]

    return JSONResponse(status_code=400, content={"error": message})
