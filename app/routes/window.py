from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.schemas.window import SpecificationResponse, WindowRequest, WindowResponse
from app.services.window_service import describe, parse_phrase, resolve_phrase
from core.errors import WindowError

router = APIRouter(prefix="/window")


@router.post("/parse", response_model=SpecificationResponse)
def parse_endpoint(payload: WindowRequest) -> SpecificationResponse:
    try:
        spec = parse_phrase(payload.phrase)
    except WindowError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return SpecificationResponse(phrase=payload.phrase, **spec.to_dict())


@router.post("/resolve", response_model=WindowResponse)
def resolve_endpoint(payload: WindowRequest) -> WindowResponse:
    try:
        window, reference = resolve_phrase(payload.phrase, at=payload.at, timezone=payload.timezone)
    except (WindowError, ValueError) as exc:
        # ValueError: unparsable "at"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return WindowResponse(**describe(payload.phrase, window, reference))
