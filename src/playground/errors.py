"""Error taxonomy for remote gateway failures.

Every concrete gateway translates provider failures into a ``GatewayError``
carrying one of a fixed set of kinds plus the message shown to the user.
Callers (session manager, image studio, voice pipeline) only ever look at
the kind and the user message, never at provider exceptions.
"""

from enum import Enum


class GatewayErrorKind(str, Enum):
    """Classified failure of a remote call."""

    RATE_LIMITED = "rate_limit"
    QUOTA_EXCEEDED = "quota"
    CONTENT_POLICY = "content_policy"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "general"


class GatewayError(Exception):
    """A remote call failed (or was rejected before being sent).

    Attributes:
        kind: Classified failure kind
        user_message: Message suitable for display
    """

    def __init__(self, kind: GatewayErrorKind, user_message: str):
        super().__init__(user_message)
        self.kind = kind
        self.user_message = user_message

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.value!r}, user_message={self.user_message!r})"


class DeviceUnavailableError(Exception):
    """Audio input could not be acquired (permission denied or unsupported)."""


# Provider error codes, checked against a structured ``code`` attribute first
# and then as substrings of the error text.
_ERROR_MARKERS: tuple[tuple[str, GatewayErrorKind], ...] = (
    ("rate_limit_exceeded", GatewayErrorKind.RATE_LIMITED),
    ("insufficient_quota", GatewayErrorKind.QUOTA_EXCEEDED),
    ("content_policy_violation", GatewayErrorKind.CONTENT_POLICY),
    ("invalid_request_error", GatewayErrorKind.INVALID_REQUEST),
)


def classify_error(exc: BaseException) -> GatewayErrorKind:
    """Map a provider exception to a ``GatewayErrorKind``.

    OpenAI SDK errors expose ``code`` (e.g. ``"insufficient_quota"``) and
    ``type`` (e.g. ``"invalid_request_error"``); those are used when present.
    Otherwise the diagnostic text is searched for the same markers.

    Args:
        exc: Exception raised by the provider client

    Returns:
        Classified error kind (UNKNOWN when nothing matches)
    """
    if isinstance(exc, GatewayError):
        return exc.kind

    structured = [
        value
        for value in (getattr(exc, "code", None), getattr(exc, "type", None))
        if isinstance(value, str)
    ]
    for marker, kind in _ERROR_MARKERS:
        if marker in structured:
            return kind

    text = str(exc)
    for marker, kind in _ERROR_MARKERS:
        if marker in text:
            return kind

    return GatewayErrorKind.UNKNOWN


CHAT_ERROR_MESSAGES: dict[GatewayErrorKind, str] = {
    GatewayErrorKind.RATE_LIMITED: (
        "Too many requests. Please wait a moment before sending another message."
    ),
    GatewayErrorKind.QUOTA_EXCEEDED: "API quota exceeded. Please check your OpenAI account.",
    GatewayErrorKind.CONTENT_POLICY: (
        "Message violates content policy. Please rephrase your request."
    ),
    GatewayErrorKind.UNKNOWN: "Failed to get response from assistant. Please try again.",
}

IMAGE_ERROR_MESSAGES: dict[GatewayErrorKind, str] = {
    GatewayErrorKind.RATE_LIMITED: (
        "Rate limit exceeded. Please wait a moment before generating another image."
    ),
    GatewayErrorKind.QUOTA_EXCEEDED: "Insufficient API quota. Please check your OpenAI account.",
    GatewayErrorKind.CONTENT_POLICY: (
        "Content policy violation. Please modify your prompt to comply with "
        "OpenAI's usage policies."
    ),
    GatewayErrorKind.UNKNOWN: "Failed to generate image. Please try again later.",
}

TRANSCRIPTION_ERROR_MESSAGES: dict[GatewayErrorKind, str] = {
    GatewayErrorKind.RATE_LIMITED: "Too many transcription requests. Please wait a moment.",
    GatewayErrorKind.QUOTA_EXCEEDED: "API quota exceeded. Please check your OpenAI account.",
    GatewayErrorKind.INVALID_REQUEST: (
        "Invalid audio format. Please try again with a different recording."
    ),
    GatewayErrorKind.UNKNOWN: "Failed to transcribe audio. Please try again.",
}


def to_gateway_error(
    exc: BaseException,
    messages: dict[GatewayErrorKind, str]
) -> GatewayError:
    """Classify ``exc`` and attach the operation's user-facing message.

    Kinds without a dedicated message in ``messages`` keep their kind but
    use the operation's general (UNKNOWN) message.
    """
    if isinstance(exc, GatewayError):
        return exc
    kind = classify_error(exc)
    message = messages.get(kind, messages[GatewayErrorKind.UNKNOWN])
    return GatewayError(kind, message)
