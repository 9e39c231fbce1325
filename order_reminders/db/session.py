from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from order_reminders.reminders.config import settings


_engine_kwargs = {"pool_pre_ping": True, "echo": False}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    # SQLite connections are shared between the API threadpool and the worker
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs.update(
        pool_size=5,
        max_overflow=10,
        pool_recycle=300,      # Recycle connections every 5 minutes
        pool_timeout=30,
    )

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
