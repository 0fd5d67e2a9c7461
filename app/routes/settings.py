from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.models.settings import SettingsDocument, SettingsValidationResponse
from app.services.dependencies import get_settings_store
from app.services.settings_store import SettingsStore
from app.services.settings_validator import validate_settings_data

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsDocument)
async def get_settings(store: SettingsStore = Depends(get_settings_store)) -> SettingsDocument:
    return store.load()


@router.put("", response_model=SettingsDocument)
async def put_settings(
    payload: dict[str, Any] = Body(...),
    store: SettingsStore = Depends(get_settings_store),
) -> SettingsDocument:
    document = validate_settings_data(payload)
    store.save(document)
    return document


@router.post("/validate", response_model=SettingsValidationResponse)
async def validate(payload: dict[str, Any] = Body(...)) -> SettingsValidationResponse:
    validate_settings_data(payload)
    return SettingsValidationResponse(valid=True)
