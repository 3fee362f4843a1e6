"""
データベース接続と初期化のユーティリティ。
Database connection and initialization utilities.
"""

import logging
import os
import time
from typing import Any, Dict

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# ロギング設定
# Configure logging
logger = logging.getLogger(__name__)

# 環境変数からデータベースURLを取得
# Read database URL from environment
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable must be set")


def _engine_options(url: str) -> Dict[str, Any]:
    """
    SQLiteの場合はスレッド間で同じ接続を共有する（テスト用のインメモリDB向け）
    Share one connection across threads for SQLite (in-memory test databases).
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def _db_init_lock_key() -> int:
    """
    DB初期化用のアドバイザリロックキーを取得する
    Get advisory lock key used for DB initialization.
    """
    raw = os.getenv("DB_INIT_LOCK_KEY", "834221").strip()
    try:
        return int(raw)
    except ValueError:
        return 834221


def _uses_advisory_lock(connection) -> bool:
    return connection.dialect.name == "postgresql"


def init_db() -> None:
    """
    データベースの初期化を行う関数
    Initialize the database schema with retries.

    コンテナ起動直後など、DBが準備できていない場合を考慮し、リトライロジックを実装しています。
    PostgreSQLでは複数ワーカーの同時初期化をアドバイザリロックで防ぎます。
    Retries while the database is still starting; on PostgreSQL an advisory
    lock keeps concurrent workers from racing on table creation.
    """
    # モデルをBaseに登録する
    # Register models on Base
    from hangout import models  # noqa: F401

    max_retries = 30
    retry_interval = 2

    for i in range(max_retries):
        try:
            with engine.begin() as connection:
                locked = _uses_advisory_lock(connection)
                if locked:
                    connection.execute(text("SELECT pg_advisory_lock(:key)"), {"key": _db_init_lock_key()})
                try:
                    Base.metadata.create_all(bind=connection)
                finally:
                    if locked:
                        connection.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": _db_init_lock_key()})
            logger.info("Database initialized successfully.")
            return
        except OperationalError as e:
            if i < max_retries - 1:
                logger.warning(
                    "Database not ready yet, retrying in %s seconds... (Attempt %s/%s)",
                    retry_interval,
                    i + 1,
                    max_retries,
                )
                time.sleep(retry_interval)
            else:
                logger.error("Could not connect to database after multiple attempts.")
                raise e
