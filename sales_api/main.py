# sales_api/main.py
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from . import queries, seeding
from .config import Settings, settings
from .database import create_db_engine
from .errors import FetchError, InvalidMonthError, StoreError
from .schemas import ChartEntry, CombinedView, ErrorBody, InitResult, Statistics, TransactionPage
from .store import TransactionStore
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorBody}, 500: {"model": ErrorBody}}

router = APIRouter(prefix="/api", responses=ERROR_RESPONSES)

def error_response(message: str, status_code: int, details=None) -> JSONResponse:
    payload = {"error": message}
    if details is not None:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content=payload)

# Dependency function for engine (created in the lifespan, one per process)
def get_engine(request: Request):
    yield request.app.state.engine

def get_store(engine: Engine = Depends(get_engine)) -> TransactionStore:
    return TransactionStore(engine)

# Dependency function for database session, opened through the store
def get_db(store: TransactionStore = Depends(get_store)):
    with store.session() as db:
        yield db

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

@router.get("/init", response_model=InitResult)
def init_database(
    store: TransactionStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    """
    Re-fetches the remote dataset and replaces every stored transaction.
    """
    try:
        count = seeding.reseed(store, app_settings.SEED_URL, app_settings.FETCH_TIMEOUT)
    except (FetchError, StoreError) as e:
        logger.error("Error initializing database: %s", e)
        return error_response("Failed to initialize database", 500, details=str(e))

    return InitResult(message="Database initialized successfully", document_count=count)

@router.get("/transactions", response_model=TransactionPage)
def list_transactions(
    month: Optional[str] = None,
    search: str = "",
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, alias="perPage", ge=1),
    db: Session = Depends(get_db),
):
    """
    Lists a month's transactions.
    - **month**: Month name, e.g. March (any year)
    - **search**: Matches title, description or price
    - **page** / **perPage**: Pagination; omit perPage to get every match
    """
    try:
        return queries.list_transactions(db, month, search=search, page=page, per_page=per_page)
    except InvalidMonthError:
        return error_response("Invalid month", 400)
    except StoreError as e:
        logger.exception("Error fetching transactions")
        return error_response("Error processing transactions", 500, details=str(e))

@router.get("/statistics", response_model=Statistics)
def get_statistics(month: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return queries.statistics(db, month)
    except InvalidMonthError:
        return error_response("Invalid month", 400)
    except StoreError as e:
        logger.exception("Error calculating statistics")
        return error_response("Error calculating statistics", 500, details=str(e))

@router.get("/barchart", response_model=List[ChartEntry])
def get_bar_chart(month: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return queries.bar_chart(db, month)
    except InvalidMonthError:
        return error_response("Invalid month", 400)
    except StoreError as e:
        logger.exception("Error generating bar chart data")
        return error_response("Error generating bar chart data", 500, details=str(e))

@router.get("/piechart", response_model=List[ChartEntry])
def get_pie_chart(month: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return queries.pie_chart(db, month)
    except InvalidMonthError:
        return error_response("Invalid month", 400)
    except StoreError as e:
        logger.exception("Error generating pie chart data")
        return error_response("Error generating pie chart data", 500, details=str(e))

@router.get("/combined", response_model=CombinedView)
def get_combined(month: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Statistics, bar chart and pie chart for one month in a single response.
    """
    try:
        return queries.combined(db, month)
    except InvalidMonthError:
        return error_response("Invalid month", 400)
    except StoreError as e:
        logger.exception("Error fetching combined data")
        return error_response("Error fetching combined data", 500, details=str(e))

async def _validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response("Invalid request", 400, details=jsonable_encoder(exc.errors()))

async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return error_response("Internal server error", 500, details=str(exc))

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the API. The engine and its pool live from startup to shutdown of
    the returned app and reach the handlers through get_engine.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings.LOG_LEVEL)
        engine = create_db_engine(app_settings)
        store = TransactionStore(engine)

        try:
            store.ensure_schema()
            logger.info("Transactions table created or already exists")
        except StoreError:
            logger.exception("Could not create the transactions table")

        if app_settings.SEED_ON_STARTUP:
            seeding.bootstrap_if_empty(store, app_settings.SEED_URL, app_settings.FETCH_TIMEOUT)

        app.state.settings = app_settings
        app.state.engine = engine
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(
        title="Sales Transactions API",
        description="Monthly transaction listings, statistics and chart data for the sales dashboard.",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # This is the route for the root URL "/"
    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Sales Transactions API"}

    app.include_router(router)
    return app

app = create_app()

def run():
    uvicorn.run("sales_api.main:app", host="0.0.0.0", port=settings.PORT)

if __name__ == "__main__":
    run()
