from typing import Any, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

class ErrorPayload(BaseModel):
    code: str
    details: List[str]

class ApiResponse(BaseModel):
    """Envelope shared by every endpoint"""
    success: bool
    data: Optional[Any] = None
    error: Optional[ErrorPayload] = None

def send_response(data: Any, status_code: int = 200) -> JSONResponse:
    body = ApiResponse(success=True, data=data, error=None)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
