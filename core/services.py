"""
Base service classes.
Services hold the business rules and reach the database through repositories.
"""
from datetime import datetime
from typing import Optional
import logging

from django.utils import timezone


class BaseService:
    """
    Base class for domain services.
    Each service logs to "<module>.<ClassName>", e.g. rentals.services.RentalService.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @staticmethod
    def now(now: Optional[datetime] = None) -> datetime:
        """The given moment (back-dated entries, tests) or the current time"""
        return now or timezone.now()

    @staticmethod
    def _with_context(message: str, context: dict) -> str:
        if not context:
            return message
        pairs = ' '.join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{message} | {pairs}"

    def log_info(self, message: str, **context):
        self.logger.info(self._with_context(message, context))

    def log_warning(self, message: str, **context):
        self.logger.warning(self._with_context(message, context))

    def log_error(self, message: str, error: Exception = None, **context):
        """Log error message with context (and traceback when ``error`` is given)"""
        self.logger.error(self._with_context(message, context), exc_info=error)
