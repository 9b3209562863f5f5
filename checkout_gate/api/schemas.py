from typing import Dict, List, Literal, Optional
from pydantic import BaseModel

Behavior = Literal["allow", "block"]

class FieldChange(BaseModel):
    value: str = ""

class SubmitRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None

    def provided(self) -> Dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v is not None}

class InterceptRequest(BaseModel):
    canBlockProgress: bool = True

class InterceptError(BaseModel):
    message: str

class InterceptResponse(BaseModel):
    behavior: Behavior
    errors: Optional[List[InterceptError]] = None
