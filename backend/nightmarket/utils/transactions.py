from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def committed(session: Session) -> Iterator[Session]:
    """
    Run a unit of work and commit it, rolling back if the block raises.
    Inside an outer transaction the block runs in a SAVEPOINT instead so the
    caller keeps control of the final commit.
        with committed(db):
            db.add(row)
    """
    if session.in_nested_transaction():
        with session.begin_nested():
            yield session
        return
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
