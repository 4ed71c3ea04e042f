"""
Domain errors raised by the service layer.
Routers never catch these; main.create_app installs one handler that maps
them to JSON responses.
"""
import logging

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code: int = 400
    retryable: bool = False

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(DomainError):
    """Referenced entity does not exist or belongs to another project."""
    status_code = 404


class ValidationError(DomainError):
    """Malformed input that pydantic cannot catch on its own."""
    status_code = 400


class InvalidStateError(DomainError):
    """Operation not allowed in the entity's current state."""
    status_code = 409


class ConflictError(DomainError):
    """Lost a race on a row that is updated concurrently. Safe to retry once."""
    status_code = 409
    retryable = True


async def with_conflict_retry(fn, *args, retries: int = 1, **kwargs):
    """Runs fn again (up to `retries` times) when it raises ConflictError."""
    attempt = 0
    while True:
        try:
            return await fn(*args, **kwargs)
        except ConflictError as exc:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning("retrying %s after conflict (%s/%s): %s", fn.__name__, attempt, retries, exc.detail)
