# database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _build_connect_args(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def mask_db_url(db_url: str) -> str:
    try:
        return str(make_url(db_url).set(password="***"))
    except Exception:
        return db_url


def build_engine(db_url: str) -> Engine:
    return create_engine(db_url, pool_pre_ping=True, future=True, connect_args=_build_connect_args(db_url))
