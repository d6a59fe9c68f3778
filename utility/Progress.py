# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: Progress
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import List, Protocol, runtime_checkable

from utility.logging_utils import get_class_logger


@runtime_checkable
class ProgressSink(Protocol):
    def update_message(self, message: str) -> None:
        ...

    def update_value(self, steps: int = 1) -> None:
        ...


@dataclass
class LoggingProgress(ProgressSink):
    """
    Default sink: writes progress messages to the log and keeps a running
    step count. Also records messages so callers (and tests) can inspect them.
    """
    logger: logging.Logger | None = None
    value: int = 0
    messages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    def update_message(self, message: str) -> None:
        self.messages.append(message)
        self.logger.info(message)

    def update_value(self, steps: int = 1) -> None:
        self.value += steps
        self.logger.debug("Progress value now %d", self.value)
