import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from cautela.configs import DB_URI, DEBUG

logger = logging.getLogger(__name__)

# Only use client_encoding for PostgreSQL, not SQLite
engine_kwargs = {'echo': DEBUG}
if DB_URI.startswith('sqlite'):
    engine_kwargs['connect_args'] = {'check_same_thread': False}
    if ':memory:' in DB_URI:
        engine_kwargs['poolclass'] = StaticPool
else:
    engine_kwargs['client_encoding'] = 'utf8'
engine = create_engine(DB_URI, **engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class CautelaBase:

    @classmethod
    def get_many(cls, session, offset=None, limit=None):
        return session.query(cls).offset(offset).limit(limit).all()

    @classmethod
    def get(cls, session, id):
        return session.get(cls, id)


Base = declarative_base(cls=CautelaBase)


def init(bind=None):
    # Models must be registered on Base before create_all
    from cautela.core import models  # noqa: F401
    try:
        Base.metadata.create_all(bind=bind or engine)
    except Exception as e:
        logger.warning(f"[WARNING] Database initialization failed: {e}")


def get_session():
    """Yields a request scoped session, closed once the response is sent."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
