import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from fintrack.accounts.budgets.router import router as budgets_router
from fintrack.accounts.expenses.router import router as expenses_router
from fintrack.config import settings
from fintrack.core.handlers import register_exception_handlers
from fintrack.core.middleware import enforce_deadline, log_requests
from fintrack.database import Base, engine
from fintrack.users.routers import auth_router
from fintrack.users.routers import router as user_router


def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, rotation="500 MB", level=settings.LOG_LEVEL)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    configure_logging()

    # Ensure upload folder exists
    upload_dir = Path(settings.UPLOAD_DIR)
    (upload_dir / "avatars").mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title="FINANCE TRACKER API",
        description="An API for tracking personal expenses and budgets.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(enforce_deadline)
    app.middleware("http")(log_requests)

    register_exception_handlers(app)

    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    # Routers
    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(user_router, prefix="/api/users", tags=["Users"])
    app.include_router(expenses_router, prefix="/api/expenses", tags=["Expenses"])
    app.include_router(budgets_router, prefix="/api/budgets", tags=["Budgets"])

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run("fintrack.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
