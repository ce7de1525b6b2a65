from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from expense_tracker.config import DEFAULT_CONFIG
from expense_tracker.database import TransactionStore, as_dicts
from expense_tracker.errors import NotFoundError, StorageError
from expense_tracker.schemas import TransactionPayload

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> TransactionStore:
    return request.app.state.store


@router.post("/transactions")
async def create_transaction(
    payload: TransactionPayload | None = None,
    store: TransactionStore = Depends(get_store),
):
    payload = payload or TransactionPayload()
    new_id = await store.create_transaction(*payload.as_row())
    return {"id": new_id}


@router.get("/transactions")
async def list_transactions(store: TransactionStore = Depends(get_store)):
    transactions = await store.list_transactions()
    return {"transactions": as_dicts(transactions)}


@router.get("/transactions/{transaction_id}")
async def get_transaction(transaction_id: int, store: TransactionStore = Depends(get_store)):
    transaction = await store.get_transaction(transaction_id)
    return {"transaction": asdict(transaction)}


@router.put("/transactions/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    payload: TransactionPayload | None = None,
    store: TransactionStore = Depends(get_store),
):
    payload = payload or TransactionPayload()
    await store.update_transaction(transaction_id, *payload.as_row())
    return {"message": "Transaction updated successfully"}


@router.delete("/transactions/{transaction_id}")
async def delete_transaction(transaction_id: int, store: TransactionStore = Depends(get_store)):
    await store.delete_transaction(transaction_id)
    return {"message": "Transaction deleted successfully"}


@router.get("/summary")
async def summary(store: TransactionStore = Depends(get_store)):
    result = await store.compute_summary()
    return {"summary": asdict(result)}


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=404)


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # An id that is not an integer cannot match any row.
    if any(err["loc"][0] == "path" for err in errors):
        return JSONResponse({"error": str(NotFoundError("Transaction"))}, status_code=404)
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in errors
    )
    return JSONResponse({"error": message}, status_code=422)


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


def create_app(db_path: str = DEFAULT_CONFIG["db_path"]) -> FastAPI:
    """Build the API bound to the SQLite database at *db_path*.

    The storage handle is opened when the application starts and closed on
    shutdown; handlers receive it through the ``get_store`` dependency.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = await TransactionStore.open(db_path)
        app.state.store = store
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(title="Expense Tracker API", lifespan=lifespan)
    app.include_router(router)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(StorageError, _storage_error)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    return app
