import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_USERNAME, CORS_ALLOWED_ORIGINS, LOG_LEVEL
from routers import admin_router, auth_router, chart_router, dashboard_router, file_router, upload_router
from services.errors import ColumnNotFoundError, InputValidationError, ParseError, SheetNotFoundError

# Import DB init function
from database import Base, SessionLocal, engine
from models import db_models  # noqa: F401  registers tables on Base

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_db():
    Base.metadata.create_all(bind=engine)


def seed_admin():
    if not (ADMIN_USERNAME and ADMIN_PASSWORD):
        return
    from services.auth_service import ensure_admin

    db = SessionLocal()
    try:
        ensure_admin(db, ADMIN_USERNAME, ADMIN_EMAIL, ADMIN_PASSWORD)
    finally:
        db.close()


app = FastAPI(
    title="Excel Analytics API",
    description="Upload spreadsheets, summarise their sheets and build chart data from selected columns.",
    version="1.0.0",
)


# Run create_db() once when app starts
@app.on_event("startup")
def on_startup():
    logger.info("Initializing database...")
    create_db()
    seed_admin()
    logger.info("Database initialized.")


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ParseError)
async def parse_error_handler(request: Request, exc: ParseError):
    logger.warning(f"{request.url.path}: {exc.message}")
    return _error(400, exc.message)


@app.exception_handler(SheetNotFoundError)
async def sheet_not_found_handler(request: Request, exc: SheetNotFoundError):
    return _error(404, exc.message)


@app.exception_handler(ColumnNotFoundError)
async def column_not_found_handler(request: Request, exc: ColumnNotFoundError):
    return _error(404, exc.message)


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    return _error(400, exc.message)


app.include_router(auth_router.router)
app.include_router(upload_router.router)
app.include_router(file_router.router)
app.include_router(chart_router.router)
app.include_router(admin_router.router)
app.include_router(dashboard_router.router)


@app.get("/")
async def root():
    return {"message": "Excel Analytics API is running"}


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
