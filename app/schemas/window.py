from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class WindowRequest(BaseModel):
    phrase: str = Field(..., description='Window phrase such as "from yesterday to 2 April 2022"')
    at: Optional[str] = Field(None, description="Reference instant; defaults to now")
    timezone: Optional[str] = Field(None, description="IANA zone of the reference instant")


class BoundPayload(BaseModel):
    kind: str
    instant: Optional[str] = None
    duration_ns: Optional[int] = None
    in_future: Optional[bool] = None
    verbal: Optional[str] = None


class SpecificationResponse(BaseModel):
    phrase: str
    left: Optional[BoundPayload] = None
    right: Optional[BoundPayload] = None


class WindowResponse(BaseModel):
    phrase: str
    reference: str
    sliding: bool
    slide: Optional[str] = None
    slide_ns: Optional[int] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
