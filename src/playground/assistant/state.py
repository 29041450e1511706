from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of the active assistant session.

    ERROR is idle with a visible error; it accepts new sends like IDLE.
    """

    IDLE = "idle"
    SENDING = "sending"
    ERROR = "error"
