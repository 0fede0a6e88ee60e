class ArgumentError(ValueError):
    """
    Invalid or missing input supplied by the caller.

    Raised before any member is contacted.
    """


class ValidationError(ValueError):
    """
    Malformed event appended to an EventLog.
    """


class UnpackError(ValueError):
    pass
