from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel

class RequestInput(BaseModel):
    method: Literal["GET", "POST"]
    path: str
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None  # raw template string, placeholders left unresolved

class BatchRequest(BaseModel):
    key: str
    input: RequestInput

class BatchRequestChain(BaseModel):
    requests: List[BatchRequest]
    next: Optional["BatchRequestChain"] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class CartItem(BaseModel):
    title: str = ""
    image: str = ""
    price: Any = None  # passed through as upstream sent it

BatchRequestChain.model_rebuild()
