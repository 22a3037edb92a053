from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from vendor_grading.config import get_settings

Base = declarative_base()
_settings = get_settings()


def _engine_options(settings) -> dict:
    """Postgres gets ssl and pre-ping; SQLite (tests, local demos) takes the defaults."""
    if settings.database_url.startswith("sqlite"):
        return {}
    options = {"pool_pre_ping": True}
    if settings.database_require_ssl:
        options["connect_args"] = {"ssl": True}
    return options


engine = create_async_engine(
    _settings.database_url,
    echo=_settings.environment == "development" and _settings.log_level.upper() == "DEBUG",
    **_engine_options(_settings),
)
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db():
    """One transaction per request: commit on success, roll back on any error (grading errors included)."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
