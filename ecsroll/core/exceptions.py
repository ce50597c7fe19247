__all__ = [
    "BaseError",
    "BadRequestError",
    "BestEffortError",
    "LoadError",
    "NotFoundError",
    "NotSupportedError",
    "RemoteCallError",
    "ValidationError",
    "WaitTimeoutError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class ValidationError(BadRequestError):
    """Deploy request can not be carried out for this service."""


class NotFoundError(BaseError):
    status_code = 404


class NotSupportedError(BaseError):
    status_code = 415


class LoadError(BaseError):
    status_code = 500


class RemoteCallError(BaseError):
    """A deploy stage failed while talking to a collaborator.

    The original error is chained as ``__cause__``.
    """

    status_code = 502
    stage: str

    def __init__(self, stage: str, error: BaseException):
        self.stage = stage
        super().__init__(f"failed to {stage}: {error}")


class WaitTimeoutError(BaseError):
    status_code = 504


class BestEffortError(BaseError):
    status_code = 500
