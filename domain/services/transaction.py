"""Transaction helpers shared by the tagging domain services.

Every tagging step (one link plus its count change) is committed on its
own, so an interrupted multi-tag operation leaves links and counts
consistent for the steps that completed.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.exceptions import TaggingStoreError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_step(db_session: Session, description: str) -> Iterator[None]:
    """Run a block as one committed transaction.

    Commits when the block completes, rolls back and re-raises otherwise.
    Store errors are re-raised as TaggingStoreError.

    Args:
        db_session (Session): Session the block works with.
        description (str): What the block does, used in log and error messages.

    Example:
        >>> with atomic_step(db, "tag article:1 with 'news'"):
        ...     await tagged_repository.add(db, subject, "news", "News")
        ...     await tag_repository.increment_count(db, "news", "News", 1)
    """
    try:
        yield
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Failed to {description}: {str(e)}")
        raise TaggingStoreError(f"Failed to {description}", original_error=e) from e
    except Exception:
        db_session.rollback()
        raise


@contextmanager
def store_errors(description: str) -> Iterator[None]:
    """Re-raise store errors of a read-only block as TaggingStoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Failed to {description}: {str(e)}")
        raise TaggingStoreError(f"Failed to {description}", original_error=e) from e
