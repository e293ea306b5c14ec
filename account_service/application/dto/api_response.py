from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Envelope for every successful response"""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(serialization_alias="statusCode")
    data: Any = None
    message: str = "Success"
    success: bool = True

    @classmethod
    def of(cls, status_code: int, data: Any, message: str = "Success") -> "ApiResponse":
        return cls(status_code=status_code, data=data, message=message, success=status_code < 400)


class ApiErrorResponse(BaseModel):
    """Envelope for every error response"""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(serialization_alias="statusCode")
    data: Any = None
    message: str
    success: bool = False
    errors: List[Any] = Field(default_factory=list)
