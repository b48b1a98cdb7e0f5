from pos_analytics.database.base import Base
from pos_analytics.database.engine import build_engine, engine
from pos_analytics.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "build_engine", "engine", "get_db", "session_scope", "SessionLocal"]
