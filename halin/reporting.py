"""
Error reporting side channel.

Reporters are fire-and-forget: the cluster manager never branches on
whether a report was delivered, and a reporter that raises is logged
and otherwise ignored.
"""
import abc
import attr
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ErrorReporter(abc.ABC):
    @abc.abstractmethod
    def report_error(self, err: BaseException, message: Optional[str] = None):
        raise NotImplementedError

    @abc.abstractmethod
    def info(self, msg: str, *args: Any):
        raise NotImplementedError

    @abc.abstractmethod
    def fine(self, msg: str, *args: Any):
        raise NotImplementedError


@attr.s
class LoggingReporter(ErrorReporter):
    logger: logging.Logger = attr.ib(
        factory=lambda: logging.getLogger("halin.reporter"),
        validator=attr.validators.instance_of(logging.Logger),
    )

    def report_error(self, err: BaseException, message: Optional[str] = None):
        self.logger.error(
            "%s", message or str(err), exc_info=(type(err), err, err.__traceback__)
        )

    def info(self, msg: str, *args: Any):
        self.logger.info(msg, *args)

    def fine(self, msg: str, *args: Any):
        self.logger.debug(msg, *args)


@attr.s(frozen=True)
class SafeReporter(ErrorReporter):
    """
    Guards every call into the wrapped reporter.
    """

    reporter: ErrorReporter = attr.ib(
        validator=attr.validators.instance_of(ErrorReporter)
    )

    def report_error(self, err: BaseException, message: Optional[str] = None):
        try:
            self.reporter.report_error(err, message)
        except Exception:
            logger.debug("Reporter failed to report %r", err, exc_info=True)

    def info(self, msg: str, *args: Any):
        try:
            self.reporter.info(msg, *args)
        except Exception:
            logger.debug("Reporter failed on info: %s", msg, exc_info=True)

    def fine(self, msg: str, *args: Any):
        try:
            self.reporter.fine(msg, *args)
        except Exception:
            logger.debug("Reporter failed on fine: %s", msg, exc_info=True)


def safe(reporter: Optional[ErrorReporter]) -> SafeReporter:
    if reporter is None:
        reporter = LoggingReporter()
    if isinstance(reporter, SafeReporter):
        return reporter
    return SafeReporter(reporter)
