from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from skladito.core.errors import SkladitoError, Unauthorized


async def handle_skladito_error(request: Request, exc: SkladitoError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SkladitoError, handle_skladito_error)
