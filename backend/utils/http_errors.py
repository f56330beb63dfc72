import logging

from fastapi import HTTPException, status

from crud.errors import LedgerError, NotFoundError, MaterialInUseError

logger = logging.getLogger("http_errors")


def to_http_exception(exc, action: str) -> HTTPException:
    """Map a crud-layer failure onto the HTTP error the client sees.

    Expects a LedgerError or SQLAlchemyError; the caller has already
    rolled the session back.
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, MaterialInUseError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, LedgerError):
        logger.warning(f"{action} rejected: {exc}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception(f"Database error while trying to {action}: {exc}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}")
