import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.security import SecurityConfig
from app.routers import auth, user, team, task
from app.utils.errors import AppError

logging.basicConfig(level=SecurityConfig.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Team Task Manager API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=SecurityConfig.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def envelope_response(status_code: int, error: str, message: str = None) -> JSONResponse:
    body = {"success": False, "error": error}
    if message:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return envelope_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return envelope_response(400, "Validation error", details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return envelope_response(500, "Internal server error")


# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(team.router, prefix="/teams", tags=["Teams"])
app.include_router(task.router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting Team Task Manager API ({SecurityConfig.ENVIRONMENT})")


# Root route
@app.get("/")
def read_root():
    return {"success": True, "message": "Team Task Manager API"}


@app.get("/health")
def health():
    return {"status": "ok"}
