import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Iterator, List

import anyio

from expense_tracker.core.models import Summary, Transaction
from expense_tracker.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

INCOME = "income"
EXPENSE = "expense"

_TRANSACTION_COLUMNS = "id, type, category, amount, date, description"

# Bounds of an SQLite INTEGER; ids outside them cannot be bound or stored.
_MIN_ROW_ID = -(2 ** 63)
_MAX_ROW_ID = 2 ** 63 - 1


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL,
            category TEXT NOT NULL,
            amount REAL NOT NULL,
            date TEXT NOT NULL,
            description TEXT
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            type TEXT NOT NULL
        )
        """
    )
    conn.commit()


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        logger.warning("%s failed: %s", operation, exc)
        raise StorageError(str(exc)) from exc


def _check_id(transaction_id: int) -> None:
    if not _MIN_ROW_ID <= transaction_id <= _MAX_ROW_ID:
        raise NotFoundError("Transaction", transaction_id)


def connect(db_path: str) -> sqlite3.Connection:
    """Open the SQLite database at *db_path* and make sure the schema exists.

    The connection may be used from threads other than the one that opened
    it; callers are responsible for not issuing statements concurrently.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with _storage_errors("connect"):
        conn = sqlite3.connect(path, check_same_thread=False)
        _init_db(conn)
    logger.debug("Opened database %s", path)
    return conn


def create_transaction(
    conn: sqlite3.Connection,
    tx_type: str | None,
    category: str | None,
    amount: float | None,
    date: str | None,
    description: str | None = None,
) -> int:
    """Insert a transaction and return its generated id.

    Parameters
    ----------
    conn:
        Open connection to the database.
    tx_type:
        ``"income"`` or ``"expense"``. Stored as given.
    category, amount, date, description:
        Column values. ``None`` is bound as NULL and rejected by the schema
        for every column except ``description``.
    """
    with _storage_errors("create_transaction"):
        with conn:
            cur = conn.execute(
                """
                INSERT INTO transactions (type, category, amount, date, description)
                VALUES (?, ?, ?, ?, ?)
                """,
                (tx_type, category, amount, date, description),
            )
    logger.debug("Created transaction %s", cur.lastrowid)
    return cur.lastrowid


def list_transactions(conn: sqlite3.Connection) -> List[Transaction]:
    """Return every stored transaction in the order SQLite yields them."""
    with _storage_errors("list_transactions"):
        rows = conn.execute(
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions"
        ).fetchall()
    return [Transaction(*row) for row in rows]


def get_transaction(conn: sqlite3.Connection, transaction_id: int) -> Transaction:
    _check_id(transaction_id)
    with _storage_errors("get_transaction"):
        row = conn.execute(
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE id = ?",
            (transaction_id,),
        ).fetchone()
    if row is None:
        raise NotFoundError("Transaction", transaction_id)
    return Transaction(*row)


def update_transaction(
    conn: sqlite3.Connection,
    transaction_id: int,
    tx_type: str | None,
    category: str | None,
    amount: float | None,
    date: str | None,
    description: str | None = None,
) -> int:
    """Replace all fields of a transaction.

    Returns the number of changed rows. Raises ``NotFoundError`` when no row
    has *transaction_id*.
    """
    _check_id(transaction_id)
    with _storage_errors("update_transaction"):
        with conn:
            cur = conn.execute(
                """
                UPDATE transactions
                SET type = ?, category = ?, amount = ?, date = ?, description = ?
                WHERE id = ?
                """,
                (tx_type, category, amount, date, description, transaction_id),
            )
    if cur.rowcount == 0:
        raise NotFoundError("Transaction", transaction_id)
    logger.debug("Updated transaction %s", transaction_id)
    return cur.rowcount


def delete_transaction(conn: sqlite3.Connection, transaction_id: int) -> int:
    _check_id(transaction_id)
    with _storage_errors("delete_transaction"):
        with conn:
            cur = conn.execute(
                "DELETE FROM transactions WHERE id = ?", (transaction_id,)
            )
    if cur.rowcount == 0:
        raise NotFoundError("Transaction", transaction_id)
    logger.debug("Deleted transaction %s", transaction_id)
    return cur.rowcount


def compute_summary(conn: sqlite3.Connection) -> Summary:
    """Return total income, total expense and their difference.

    Empty sums are reported as ``0.0`` rather than NULL.
    """
    with _storage_errors("compute_summary"):
        row = conn.execute(
            """
            SELECT COALESCE(SUM(CASE WHEN type = ? THEN amount END), 0.0) AS total_income,
                   COALESCE(SUM(CASE WHEN type = ? THEN amount END), 0.0) AS total_expense
            FROM transactions
            """,
            (INCOME, EXPENSE),
        ).fetchone()
    total_income = float(row[0])
    total_expense = float(row[1])
    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
    )


class TransactionStore:
    """Asynchronous handle around the single shared SQLite connection.

    Every operation runs its statement in a worker thread. A capacity limiter
    of one keeps statements on the shared connection from overlapping while
    the awaiting request is the only one suspended.
    """

    def __init__(self, conn: sqlite3.Connection, db_path: str) -> None:
        self._conn = conn
        self.db_path = db_path
        self._limiter = anyio.CapacityLimiter(1)

    @classmethod
    async def open(cls, db_path: str) -> "TransactionStore":
        conn = await anyio.to_thread.run_sync(connect, db_path)
        return cls(conn, db_path)

    async def close(self) -> None:
        await self._run(lambda conn: conn.close())
        logger.debug("Closed database %s", self.db_path)

    async def _run(self, func: Callable, *args):
        return await anyio.to_thread.run_sync(
            func, self._conn, *args, limiter=self._limiter
        )

    async def create_transaction(self, tx_type, category, amount, date, description=None) -> int:
        return await self._run(create_transaction, tx_type, category, amount, date, description)

    async def list_transactions(self) -> List[Transaction]:
        return await self._run(list_transactions)

    async def get_transaction(self, transaction_id: int) -> Transaction:
        return await self._run(get_transaction, transaction_id)

    async def update_transaction(
        self, transaction_id, tx_type, category, amount, date, description=None
    ) -> int:
        return await self._run(
            update_transaction, transaction_id, tx_type, category, amount, date, description
        )

    async def delete_transaction(self, transaction_id: int) -> int:
        return await self._run(delete_transaction, transaction_id)

    async def compute_summary(self) -> Summary:
        return await self._run(compute_summary)


def as_dicts(items) -> List[dict]:
    return [asdict(item) for item in items]
