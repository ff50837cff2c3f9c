"""
Clock helpers.

Every component that reads the time takes a ``clock`` callable returning
integer unix seconds, so tests can drive time without sleeping.
"""

import time
from typing import Callable


Clock = Callable[[], int]


def system_clock() -> int:
    """Current wall-clock time in whole unix seconds."""
    return int(time.time())
