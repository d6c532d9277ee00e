from fastapi import HTTPException
from app.schemas.common import ActionResult, ErrorKind

STATUS_FOR_ERROR = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ORDER_NOT_FOUND: 404,
    ErrorKind.ILLEGAL_TRANSITION: 409,
    ErrorKind.USAGE_LIMIT_REACHED: 409,
}


class ActionError(HTTPException):
    """HTTPException carrying the business error kind of a failed ActionResult."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(status_code=STATUS_FOR_ERROR.get(kind, 400), detail=detail)
        self.kind = kind


def raise_for_failure(result: ActionResult) -> ActionResult:
    if not result.success:
        raise ActionError(result.error, result.message or "Request failed")
    return result
