from fastapi import HTTPException, status

from featured_images.domain.errors import ContentNotFoundError, ErrorKind, ResolutionError

_STATUS = {
    ErrorKind.invalid_input: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.invalid_identifier: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.no_suitable_size: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.missing_credentials: status.HTTP_409_CONFLICT,
    ErrorKind.http_error: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.api_error: status.HTTP_502_BAD_GATEWAY,
}


def resolution_http_error(error: ResolutionError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS.get(error.kind, status.HTTP_502_BAD_GATEWAY),
        detail={"code": error.kind.value, "message": error.message},
    )


def not_found(exc: ContentNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "not_found", "message": str(exc)},
    )


def superseded() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"code": "superseded", "message": "A newer preview request replaced this one."},
    )
