import asyncio
from typing import Any, Callable, TypeVar

from peewee import Database, DatabaseProxy, Model, SqliteDatabase
from playhouse.db_url import parse
from playhouse.pool import PooledDatabase, PooledPostgresqlDatabase

from core.logging import get_logger

T = TypeVar("T")

# Models bind to this proxy; the concrete database is created and owned by
# whoever starts the application (see main.lifespan) and handed to init_db.
db = DatabaseProxy()

log = get_logger("db")


class BaseModel(Model):
    class Meta:
        database = db


def create_database(url: str, max_connections: int = 20) -> Database:
    """
    Build a database handle from a connection URL.

    postgresql:// URLs get a connection pool; sqlite:/// URLs (local runs and
    tests) get a plain SqliteDatabase.
    """
    if url.startswith("sqlite"):
        return SqliteDatabase(parse(url)["database"], pragmas={"journal_mode": "wal"})

    parsed_url = parse(url)
    db_name = parsed_url.pop("database")
    return PooledPostgresqlDatabase(
        db_name,
        max_connections=max_connections,
        stale_timeout=300,
        **parsed_url
    )


def init_db(database: Database) -> None:
    """Bind the models to a database and create tables if they don't exist."""
    db.initialize(database)

    from db.models import User, TrackedPlayer, PlayerStatsHistory, LeaderboardEntry

    with database.connection_context():
        # Phase 1: accounts, tracking and the stats time series
        database.create_tables([User, TrackedPlayer, PlayerStatsHistory], safe=True)
        log.info("schema_phase_applied", phase=1)

        # Phase 2: leaderboard snapshot
        database.create_tables([LeaderboardEntry], safe=True)
        log.info("schema_phase_applied", phase=2)


def close_db(database: Database) -> None:
    """Close the current connection and, for pools, every pooled connection."""
    if not database.is_closed():
        database.close()
    if isinstance(database, PooledDatabase):
        database.close_all()
    log.info("database_closed")


async def run_in_db_thread(
    database: Database,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run blocking peewee work in a worker thread inside its own connection.

    Peewee connections are thread-local, so the connection is opened and
    released in the same worker thread that uses it.
    """

    def _call() -> T:
        with database.connection_context():
            return func(*args, **kwargs)

    return await asyncio.to_thread(_call)
