from .session import Base, create_database_engine, create_session_factory, init_database

__all__ = ["Base", "create_database_engine", "create_session_factory", "init_database"]
