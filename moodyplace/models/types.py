"""Типы колонок."""
from sqlalchemy import BigInteger, Integer, TypeDecorator


class BigIntegerAuto(TypeDecorator):
    """
    BigInteger с автоинкрементом, работающий в SQLite и PostgreSQL.

    В SQLite использует INTEGER (только он автоинкрементируется),
    в PostgreSQL - BIGINT.
    """

    impl = BigInteger
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(Integer())
        return dialect.type_descriptor(BigInteger())
