# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import init_db
from utils.errors import StoreError
from utils.tokenJWT import bearer_token, token_subject

from routes.cart import router as cart_router
from routes.checkout import router as checkout_router

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

# Initialisation
init_db()

app = FastAPI(title="Storefront Cart API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(status_code: int, message: str, details=None, headers=None) -> JSONResponse:
    body = {"error": True, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return _envelope(exc.status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Body parsing runs before the auth dependency; anonymous callers still get 401
    if token_subject(bearer_token(request.headers.get("authorization"))) is None:
        return _envelope(401, "Authentication required", headers={"WWW-Authenticate": "Bearer"})
    details = ", ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
    )
    return _envelope(400, "Invalid input", details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(500, "Internal server error", str(exc))


# Router registration
app.include_router(cart_router)
app.include_router(checkout_router)

@app.get("/")
def read_root():
    return {"message": "Storefront Cart API is running"}
