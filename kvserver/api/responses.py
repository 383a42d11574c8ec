from kvserver.schemas.common import ErrorResponse

BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Bad request"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}
METHOD_NOT_ALLOWED = {405: {"model": ErrorResponse, "description": "Method not allowed"}}
