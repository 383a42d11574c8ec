from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: str | None = None
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response the service produces itself."""

    error: ErrorDetail

    @classmethod
    def build(
        cls,
        code: str,
        message: str,
        request_id: str | None = None,
        details: list[dict] | None = None,
    ) -> "ErrorResponse":
        return cls(
            error=ErrorDetail(
                code=code, message=message, request_id=request_id, details=details
            )
        )
