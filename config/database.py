"""Настройка базы данных и слой доступа к данным."""
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import Executable

from moodyplace.utils.exceptions import QueryFailedError
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

# Базовый класс для моделей
Base = declarative_base()

T = TypeVar("T")
Statement = Union[str, Executable]
Params = Optional[Mapping[str, Any]]


def _prepare(statement: Statement) -> Executable:
    """Строки оборачиваются в text(): значения передаются только через :placeholders."""
    if isinstance(statement, str):
        return text(statement)
    return statement


class DatabaseConnection:
    """Соединение, взятое из пула на время одной операции или транзакции."""

    def __init__(self, connection: AsyncConnection, log_statements: bool = False):
        self.connection = connection
        self.log_statements = log_statements

    async def execute(self, statement: Statement, params: Params = None):
        """Выполнить запрос и вернуть результат драйвера."""
        if self.log_statements:
            logger.debug("sql_query", sql=str(statement), params=dict(params or {}))
        try:
            if params is None:
                return await self.connection.execute(_prepare(statement))
            return await self.connection.execute(_prepare(statement), dict(params))
        except SQLAlchemyError as e:
            if self.log_statements:
                logger.error("database_query_error", error=str(e), sql=str(statement), params=dict(params or {}))
            else:
                logger.error("database_query_error", error=str(e))
            raise QueryFailedError() from e

    async def query(self, statement: Statement, params: Params = None) -> List[Dict[str, Any]]:
        """Выполнить SELECT и вернуть строки в виде словарей."""
        result = await self.execute(statement, params)
        return [dict(row._mapping) for row in result]

    async def query_one(self, statement: Statement, params: Params = None) -> Optional[Dict[str, Any]]:
        """Вернуть первую строку или None."""
        result = await self.execute(statement, params)
        row = result.first()
        return dict(row._mapping) if row is not None else None

    async def scalar(self, statement: Statement, params: Params = None) -> Any:
        """Вернуть первое значение первой строки."""
        result = await self.execute(statement, params)
        return result.scalar()

    async def insert(self, statement: Statement, params: Params = None) -> Optional[int]:
        """
        Выполнить INSERT и вернуть id вставленной строки.

        Для Core insert() id берётся из inserted_primary_key (RETURNING в
        PostgreSQL), для текстового SQL нужен явный RETURNING id.
        """
        result = await self.execute(statement, params)
        if result.returns_rows:
            row = result.first()
            return row[0] if row is not None else None
        try:
            primary_key = result.inserted_primary_key
        except InvalidRequestError:
            return result.lastrowid
        return primary_key[0] if primary_key else None

    async def update(self, statement: Statement, params: Params = None) -> int:
        """Выполнить UPDATE и вернуть количество затронутых строк."""
        result = await self.execute(statement, params)
        return result.rowcount

    async def delete(self, statement: Statement, params: Params = None) -> int:
        """Выполнить DELETE и вернуть количество затронутых строк."""
        result = await self.execute(statement, params)
        return result.rowcount


class Database:
    """
    Пул соединений с явным жизненным циклом.

    Создаётся при старте приложения (connect) и закрывается при остановке
    (close). Каждая операция берёт соединение из пула и возвращает его
    обратно независимо от результата. Повторных попыток нет: любые ошибки
    драйвера и пула превращаются в QueryFailedError.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 60,
        log_statements: bool = False,
    ):
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.log_statements = log_statements
        self._engine: Optional[AsyncEngine] = None
        self._waiting = 0

    @property
    def engine(self) -> AsyncEngine:
        """Движок SQLAlchemy (создаётся лениво)."""
        if self._engine is None:
            options: Dict[str, Any] = {"echo": False, "pool_pre_ping": True}
            if make_url(self.url).get_backend_name() != "sqlite":
                options.update(
                    pool_size=self.pool_size,
                    max_overflow=self.max_overflow,
                    pool_timeout=self.pool_timeout,
                    pool_recycle=1800,
                )
            self._engine = create_async_engine(self.url, **options)
        return self._engine

    async def connect(self) -> None:
        """Проверить соединение при старте; недоступная БД - фатальная ошибка."""
        await self.query_one("SELECT 1 AS ok")
        logger.info("database_connected", backend=make_url(self.url).get_backend_name())

    async def close(self) -> None:
        """Закрыть все соединения пула."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("database_pool_closed")

    @asynccontextmanager
    async def _begin(self) -> AsyncIterator[DatabaseConnection]:
        self._waiting += 1
        acquired = False
        try:
            async with self.engine.connect() as conn:
                self._waiting -= 1
                acquired = True
                async with conn.begin():
                    yield DatabaseConnection(conn, self.log_statements)
        except SQLAlchemyError as e:
            # Ошибки пула (таймаут получения соединения) и сети
            logger.error("database_connection_error", error=str(e))
            raise QueryFailedError() from e
        finally:
            if not acquired:
                self._waiting -= 1

    async def execute(self, statement: Statement, params: Params = None) -> None:
        async with self._begin() as conn:
            await conn.execute(statement, params)

    async def query(self, statement: Statement, params: Params = None) -> List[Dict[str, Any]]:
        async with self._begin() as conn:
            return await conn.query(statement, params)

    async def query_one(self, statement: Statement, params: Params = None) -> Optional[Dict[str, Any]]:
        async with self._begin() as conn:
            return await conn.query_one(statement, params)

    async def scalar(self, statement: Statement, params: Params = None) -> Any:
        async with self._begin() as conn:
            return await conn.scalar(statement, params)

    async def insert(self, statement: Statement, params: Params = None) -> Optional[int]:
        async with self._begin() as conn:
            return await conn.insert(statement, params)

    async def update(self, statement: Statement, params: Params = None) -> int:
        async with self._begin() as conn:
            return await conn.update(statement, params)

    async def delete(self, statement: Statement, params: Params = None) -> int:
        async with self._begin() as conn:
            return await conn.delete(statement, params)

    async def transaction(self, body: Callable[[DatabaseConnection], Awaitable[T]]) -> T:
        """
        Выполнить несколько запросов атомарно.

        Args:
            body: Корутина, получающая DatabaseConnection

        Returns:
            Результат body

        Raises:
            QueryFailedError: Ошибка БД (транзакция откатывается)
            Любое исключение body пробрасывается после отката
        """
        try:
            async with self._begin() as conn:
                return await body(conn)
        except Exception as e:
            logger.warning("transaction_rolled_back", error=str(e))
            raise

    async def create_tables(self) -> None:
        """Создать таблицы по моделям (тесты и seed; в production - alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    def pool_status(self) -> Dict[str, Any]:
        """Загруженность пула: активные, свободные и ожидающие соединения."""
        pool = self.engine.pool
        return {
            "size": pool.size() if hasattr(pool, "size") else None,
            "active": pool.checkedout() if hasattr(pool, "checkedout") else None,
            "idle": pool.checkedin() if hasattr(pool, "checkedin") else None,
            "overflow": pool.overflow() if hasattr(pool, "overflow") else None,
            "queued": self._waiting,
        }

    async def health_check(self) -> Dict[str, Any]:
        """
        Проверка здоровья для мониторинга.

        Returns:
            Статус, время ответа в миллисекундах и состояние пула
        """
        start_time = time.perf_counter()
        try:
            await self.query_one("SELECT 1 AS health_check")
        except QueryFailedError as e:
            cause = e.__cause__ or e
            return {"status": "unhealthy", "connected": False, "error": str(cause)}

        response_time = round((time.perf_counter() - start_time) * 1000, 2)
        return {
            "status": "healthy",
            "connected": True,
            "response_time_ms": response_time,
            "pool": self.pool_status(),
        }


def create_database(settings) -> Database:
    """Создать Database из настроек приложения."""
    return Database(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
        log_statements=settings.is_development and settings.database_log_statements,
    )
