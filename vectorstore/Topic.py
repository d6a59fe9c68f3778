# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: Topic
# -----------------------------------------------------------------------------
from enum import Enum


class Topic(str, Enum):
    """Which record domain an operation targets."""
    MANIFESTS = "manifests"
    EVENT_DATA = "events"
