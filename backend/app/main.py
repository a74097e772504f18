import logging
from urllib.parse import urlencode

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.config import settings, require_auth_config
from app.core.logging_config import configure_logging
from app.dependencies.auth import SignInRequired
from app.routes.auth import router as auth_router
from app.routes.users import router as users_router

logger = logging.getLogger(__name__)

require_auth_config()
configure_logging()

app = FastAPI(title="Supabase Credentials Auth")
logger.info(
    "Startup config: ENV=%s supabase=%s session_strategy=jwt sign_in_page=%s",
    settings.ENV,
    settings.SUPABASE_URL,
    settings.SIGN_IN_PAGE,
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": _error_code(exc.status_code), "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": exc.errors()},
        },
    )


@app.exception_handler(SignInRequired)
def sign_in_required_handler(request: Request, exc: SignInRequired):
    # Browsers go to the sign-in page; API clients get the standard 401 shape.
    if "text/html" in request.headers.get("accept", ""):
        target = f"{settings.SIGN_IN_PAGE}?{urlencode({'callbackUrl': exc.callback_url})}"
        return RedirectResponse(url=target, status_code=303)
    return JSONResponse(
        status_code=401,
        content={"error": "UNAUTHORIZED", "message": "Sign in required"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
