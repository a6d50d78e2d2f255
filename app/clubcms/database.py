from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Requests are served from the threadpool.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine):
    # Models must be imported before create_all sees them.
    from clubcms import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Dependency for FastAPI routes
def get_db(request: Request):
    db = request.app.state.SessionLocal()
    try:
        yield db
    finally:
        db.close()
