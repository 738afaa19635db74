"""
Transaction coordinator — one atomic unit per document operation.

Usage:
    with coordinator.atomic('supply.update', supply_id=pk):
        ...header, items, ledger...

Any exception inside the block rolls everything back and is re-raised
unchanged.
"""

import logging
import threading
from contextlib import contextmanager

from django.db import transaction

from warehouseman.exceptions import TransactionError, WarehouseError


class TransactionCoordinator:
    """
    Scoped begin/commit/rollback around transaction.atomic().

    Not reentrant: a second atomic() on the same coordinator, in the
    same thread, while one is open raises NESTED_TRANSACTION.
    """

    def __init__(self, logger=None, using: str | None = None):
        self.logger = logger or logging.getLogger('warehouseman')
        self.using = using
        self._state = threading.local()

    @property
    def in_progress(self) -> bool:
        return getattr(self._state, 'operation', None) is not None

    @contextmanager
    def atomic(self, operation: str, **context):
        if self.in_progress:
            raise TransactionError(
                'NESTED_TRANSACTION',
                operation=operation,
                open_operation=self._state.operation,
            )

        self._state.operation = operation
        try:
            with transaction.atomic(using=self.using):
                yield
        except WarehouseError as exc:
            self.logger.info(
                "transaction.rolled_back",
                extra={"operation": operation, "code": exc.code, **context},
            )
            raise
        except Exception:
            self.logger.exception(
                "transaction.failed",
                extra={"operation": operation, **context},
            )
            raise
        else:
            self.logger.debug(
                "transaction.committed",
                extra={"operation": operation, **context},
            )
        finally:
            self._state.operation = None
