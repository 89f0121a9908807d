# slot_recommender/core/errors.py


class SchedulingError(RuntimeError):
    """
    Raised by the scheduling pipeline when any stage fails unexpectedly.

    The message is generic; the underlying cause is chained
    (``raise ... from exc``) and logged, but never shown to callers.
    """

    def __init__(self, message: str = "Failed to schedule meeting") -> None:
        super().__init__(message)


class MeetingRequestNotFoundError(LookupError):
    """
    Raised when a meeting request does not exist or belongs to another organizer.
    """


class SlotNotFoundError(LookupError):
    """
    Raised when a candidate slot id does not belong to the given meeting request.
    """
