# storefront/database.py
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

# ---------------------------------------------------------
# Engine construction
#
# - SQLite (local dev / tests):
#     check_same_thread=False : requests are served from a threadpool
#     StaticPool (in-memory)  : every session sees the same database
# - Anything else (Postgres in production):
#     pool_pre_ping=True      : validate connections before using them
# ---------------------------------------------------------


def make_engine(db_url: str, echo: bool = False) -> Engine:
    """
    Build the SQLAlchemy engine for the given connection string.
    """
    if db_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=echo, **kwargs)

    return create_engine(db_url, echo=echo, pool_pre_ping=True)


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    # Import models so SQLModel metadata is populated before create_all()
    from storefront.models import cart as _cart_models  # noqa: F401
    from storefront.models import item as _item_models  # noqa: F401
    from storefront.models import user as _user_models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """
    FastAPI dependency that yields a SQLModel Session bound to the
    engine owned by the running application.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
