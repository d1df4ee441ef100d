from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import Settings
# Use the same Base as models to ensure one metadata registry
from models.base import Base


def build_engine(settings: Settings):
    uri = settings.SQLALCHEMY_DATABASE_URI
    connect_args = {}
    if uri.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(
        uri,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args=connect_args,
        future=True,
    )


def build_session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def init_db(engine):
    # Importing the model modules registers their tables on Base.metadata
    from models import folder, project, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
