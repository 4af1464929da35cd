import importlib
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from nightmarket.utils.log import get_logger

Base = declarative_base()

log = get_logger("store")

# modules whose tables belong in Base.metadata (add new modules here)
MODEL_MODULES = [
    "nightmarket.models.product",
    "nightmarket.models.event",
    "nightmarket.models.theme",
]


class Store:
    """
    Relational store holding the products, events and themes tables.

    One instance per application context; nothing here is module-global
    except the declarative Base.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, future=True, echo=echo, connect_args=connect_args)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def init_db(self, reset: bool = False) -> None:
        """Create missing tables; drop everything first when reset is set."""
        for mod in MODEL_MODULES:
            importlib.import_module(mod)
        if reset:
            log.info("Resetting database tables")
            Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        log.info("Database initialized (%s)", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Short-lived session for background jobs and scripts."""
        db = self.session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
