from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


def make_engine(database_url: str) -> AsyncEngine:
    # per Postgres l'SSL si chiede nel DSN (?ssl=require con asyncpg)
    return create_async_engine(
        database_url.strip(),
        echo=False,
        future=True,
        pool_pre_ping=True,
    )
