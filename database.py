from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from config import get_settings

DATABASE_URL = get_settings().database_url


def _engine_options(url: str) -> dict:
    options = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # requests are served from a thread pool
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # one shared connection, otherwise every session sees an empty db
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return options


# create engine
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# session maker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# base class
Base = declarative_base()


# FastAPI dependency: one session per request
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
