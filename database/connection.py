from sqlmodel import SQLModel, create_engine, Session
from config.settings import DATABASE_URL


def build_engine(url: str):
    """Create an engine for the given URL.

    SQLite is used for local runs and tests and does not take pool options;
    every other backend gets the pooled configuration.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=False,           # Set to True for SQL query debugging
        pool_size=10,         # Max number of DB connections in pool
        max_overflow=5,       # Allow 5 extra connections during peak load
        pool_recycle=300,     # Recycle connections every 5 min
        pool_pre_ping=True,   # Verify connection health before use
        pool_timeout=60       # Wait up to 60 seconds for a connection
    )


# ---------------------------------------------------------------------
# Database Engine Configuration
# ---------------------------------------------------------------------
engine = build_engine(DATABASE_URL)


# ---------------------------------------------------------------------
# Database Initialization
# ---------------------------------------------------------------------
def create_db_and_tables():
    """
    Create all database tables defined in SQLModel models.
    Called once at app startup from the lifespan hook in main.py.
    """
    # Register every table on the metadata before create_all
    import database.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# ---------------------------------------------------------------------
# Dependency for FastAPI Routes (context-managed)
# ---------------------------------------------------------------------
def get_session():
    """
    Dependency for FastAPI endpoints: one session per request.
    Example:
        @router.get("/users")
        def list_users(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


# ---------------------------------------------------------------------
# Direct Session for Scripts
# ---------------------------------------------------------------------
def get_db_session() -> Session:
    """
    For non-FastAPI contexts (the seed script, one-off maintenance).
    Returns a raw Session you must close manually.
    """
    return Session(engine)
