# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope used by every repository call."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from apistarter.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session that commits when the block succeeds and rolls back otherwise.

    The exception that caused the rollback is re-raised unchanged so callers can
    translate storage errors (e.g. ``IntegrityError``) into domain errors.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except BaseException as exc:
        logger.debug(f"uow: rollback due to {type(exc).__name__}")
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
