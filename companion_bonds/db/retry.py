"""Transactions with bounded retry for transient storage errors."""

import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from companion_bonds.core.errors import PersistenceError
from companion_bonds.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    """Lock and busy errors are worth another attempt."""
    message = str(exc).lower()
    return "locked" in message or "busy" in message


def run_in_transaction(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    attempts: int = 3,
    backoff: float = 0.05,
    label: str = "transaction",
) -> T:
    """Run work(session) and commit, all or nothing.

    Transient OperationalErrors are retried with linear backoff. Any other
    storage error, or running out of attempts, raises PersistenceError.
    Engine errors raised by work (NotFoundError, ...) roll back and
    propagate unchanged.
    """
    attempts = max(1, attempts)
    last_exc: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        session = session_factory()
        try:
            result = work(session)
            session.commit()
            return result
        except OperationalError as exc:
            session.rollback()
            last_exc = exc
            if is_transient(exc) and attempt < attempts:
                logger.warning(f"{label}: storage busy, retrying ({attempt}/{attempts})")
                time.sleep(backoff * attempt)
                continue
            raise PersistenceError(
                f"{label} failed after {attempt} attempt(s): {exc}", attempt
            ) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise PersistenceError(f"{label} failed: {exc}", attempt) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # unreachable while attempts >= 1
    raise PersistenceError(f"{label} failed", attempts) from last_exc
