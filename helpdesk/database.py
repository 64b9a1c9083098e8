from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from helpdesk.config.settings import settings


def build_engine(database_url: str):
    # sslmode only applies to PostgreSQL (Render and similar hosts require it)
    if database_url.lower().startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, connect_args={"sslmode": settings.DB_SSLMODE})


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Request-scoped session; injected into every router and service
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
