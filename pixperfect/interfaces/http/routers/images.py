"""Image endpoints: upload, transform, replace, list, fetch and delete.

Multipart form fields:

* ``image``: the file part
* ``overlay_props`` / ``text_overlay``: JSON objects, stored verbatim; the
  older ``overlayProps`` / ``textOverlay`` names are still accepted
* ``degrees``: whole degrees, clockwise, for ``/rotate``
* ``direction``: ``horizontal`` (flips top-to-bottom) or ``vertical``
  (flips left-to-right) for ``/flip``
"""
from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from pixperfect.core.security import get_current_account
from pixperfect.interfaces.http.deps import get_asset_service
from pixperfect.modules.accounts import Account as AccountDomain
from pixperfect.modules.assets import (
    UNSET,
    AssetLifecycleService,
    AssetReplaceInput,
    InvalidParameterError,
    NotFoundOrUnauthorizedError,
    StoredAsset,
    parse_mirror,
    parse_rotation,
)
from pixperfect.schemas import AssetCreatedResponse, AssetResponse, MessageResponse

router = APIRouter()

MAX_ASSET_ID = 2**63 - 1
UPLOAD_CHUNK_SIZE = 1024 * 1024


def _parse_overlay(raw: Optional[str], field_name: str) -> Optional[dict[str, Any]]:
    if raw is None or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidParameterError(f"{field_name} must be a JSON object") from exc
    if value is not None and not isinstance(value, dict):
        raise InvalidParameterError(f"{field_name} must be a JSON object")
    return value


def _either(current: Optional[str], legacy: Optional[str]) -> Optional[str]:
    return current if current is not None else legacy


def _parse_asset_id(raw: Optional[str]) -> int:
    try:
        asset_id = int((raw or "").strip())
    except ValueError as exc:
        raise NotFoundOrUnauthorizedError() from exc
    # ids are signed 64-bit row ids; anything outside cannot exist
    if not 1 <= asset_id <= MAX_ASSET_ID:
        raise NotFoundOrUnauthorizedError()
    return asset_id


async def _read_upload(
    upload: Optional[UploadFile], limit: Optional[int] = None
) -> tuple[Optional[bytes], Optional[str]]:
    """Read the file part, refusing to buffer more than ``limit`` bytes."""
    if upload is None:
        return None, None
    try:
        if limit is not None and upload.size is not None and upload.size > limit:
            raise InvalidParameterError("Uploaded file is too large")
        chunks: list[bytes] = []
        total = 0
        while chunk := await upload.read(UPLOAD_CHUNK_SIZE):
            total += len(chunk)
            if limit is not None and total > limit:
                raise InvalidParameterError("Uploaded file is too large")
            chunks.append(chunk)
    finally:
        await upload.close()
    return b"".join(chunks), upload.filename


def _created(stored: StoredAsset, message: str) -> AssetCreatedResponse:
    return AssetCreatedResponse(id=stored.id, storage_key=stored.storage_key, url=stored.url, message=message)


def _to_response(stored: StoredAsset) -> AssetResponse:
    asset = stored.asset
    return AssetResponse(
        id=asset.id,
        owner_id=asset.owner_id,
        storage_key=asset.storage_key,
        url=stored.url,
        overlay_props=asset.overlay_props,
        text_overlay=asset.text_overlay,
        created_at=asset.created_at,
    )


@router.post("/upload", response_model=AssetCreatedResponse, summary="Upload an image")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    overlay_props: Optional[str] = Form(None),
    text_overlay: Optional[str] = Form(None),
    overlay_props_legacy: Optional[str] = Form(None, alias="overlayProps"),
    text_overlay_legacy: Optional[str] = Form(None, alias="textOverlay"),
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> AssetCreatedResponse:
    props = _parse_overlay(_either(overlay_props, overlay_props_legacy), "overlay_props")
    text = _parse_overlay(_either(text_overlay, text_overlay_legacy), "text_overlay")
    data, file_name = await _read_upload(image, service.max_upload_bytes)
    stored = await service.create(account.id, data, file_name, overlay_props=props, text_overlay=text)
    return _created(stored, "Image uploaded successfully")


@router.post("/rotate", response_model=AssetCreatedResponse, summary="Rotate an image and store the result")
async def rotate_image(
    image: Optional[UploadFile] = File(None),
    degrees: Optional[str] = Form(None),
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> AssetCreatedResponse:
    operation = parse_rotation(degrees)
    data, _ = await _read_upload(image, service.max_upload_bytes)
    stored = await service.create_transformed(account.id, data, operation)
    return _created(stored, "Image rotated successfully")


@router.post("/flip", response_model=AssetCreatedResponse, summary="Mirror an image and store the result")
async def flip_image(
    image: Optional[UploadFile] = File(None),
    direction: Optional[str] = Form(None),
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> AssetCreatedResponse:
    operation = parse_mirror(direction)
    data, _ = await _read_upload(image, service.max_upload_bytes)
    stored = await service.create_transformed(account.id, data, operation)
    return _created(stored, "Image flipped successfully")


@router.put("/image", response_model=MessageResponse, summary="Replace an image and/or its overlays")
async def replace_image(
    asset_id: Optional[str] = Form(None, alias="id"),
    image: Optional[UploadFile] = File(None),
    overlay_props: Optional[str] = Form(None),
    text_overlay: Optional[str] = Form(None),
    overlay_props_legacy: Optional[str] = Form(None, alias="overlayProps"),
    text_overlay_legacy: Optional[str] = Form(None, alias="textOverlay"),
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> MessageResponse:
    parsed_id = _parse_asset_id(asset_id)
    overlay_props = _either(overlay_props, overlay_props_legacy)
    text_overlay = _either(text_overlay, text_overlay_legacy)
    payload = AssetReplaceInput(
        overlay_props=UNSET if overlay_props is None else _parse_overlay(overlay_props, "overlay_props"),
        text_overlay=UNSET if text_overlay is None else _parse_overlay(text_overlay, "text_overlay"),
    )
    payload.data, payload.file_name = await _read_upload(image, service.max_upload_bytes)
    await service.replace(parsed_id, account.id, payload)
    return MessageResponse(message="Image updated successfully")


@router.get("/images", response_model=list[AssetResponse], summary="List the caller's images")
async def list_images(
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> list[AssetResponse]:
    return [_to_response(stored) for stored in await service.list_assets(account.id)]


@router.get("/image/{asset_id}", response_model=AssetResponse, summary="Fetch one image")
async def get_image(
    asset_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> AssetResponse:
    return _to_response(await service.get(_parse_asset_id(asset_id), account.id))


@router.delete("/image/{asset_id}", response_model=MessageResponse, summary="Delete an image")
async def delete_image(
    asset_id: str,
    account: AccountDomain = Depends(get_current_account),
    service: AssetLifecycleService = Depends(get_asset_service),
) -> MessageResponse:
    await service.delete(_parse_asset_id(asset_id), account.id)
    return MessageResponse(message="Image deleted successfully")
