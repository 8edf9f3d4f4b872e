import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from annotator.config import settings

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("postgresql"):
    connect_args = {"options": "-csearch_path=public"}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

logger.debug("Database dialect: %s", engine.dialect.name)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()



def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
