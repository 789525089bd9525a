import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import Base, engine
from app.models import product, user  # noqa: F401  (register tables)
from app.routers import auth, products
from app.utils.errors import AppError
from app.utils.response import create_response, format_validation_errors, handle_exception

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.PROJECT_NAME)

# Auto create tables
Base.metadata.create_all(bind=engine)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return create_response(format_validation_errors(exc), None, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return handle_exception(exc)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return handle_exception(exc)


# Add routes
app.include_router(auth.router)
app.include_router(products.router)


@app.get("/")
def home():
    try:
        return create_response(
            message="API is working",
            data={"service": settings.PROJECT_NAME},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)
