"""Atomic unit of work shared by the booking and schedule services"""
import logging
from contextlib import contextmanager

from django.conf import settings
from django.db import transaction, connection, OperationalError

from .exceptions import TransactionTimeoutError

logger = logging.getLogger(__name__)


def _apply_lock_timeout():
    timeout_ms = getattr(settings, 'BOOKING_LOCK_TIMEOUT_MS', 0)
    if not timeout_ms or connection.vendor != 'postgresql':
        return
    with connection.cursor() as cursor:
        # is_local=true scopes the setting to the current transaction
        cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f'{int(timeout_ms)}ms'])


@contextmanager
def atomic_unit(label):
    """
    Run the block as one transaction with a bounded lock wait.

    Lock timeouts, serialization failures and busy databases all surface as
    TransactionTimeoutError; nothing from the block is persisted.
    """
    try:
        with transaction.atomic():
            _apply_lock_timeout()
            yield
    except OperationalError as exc:
        logger.warning(f'[TX] {label} aborted by the store: {exc}')
        raise TransactionTimeoutError() from exc
