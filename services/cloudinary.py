"""Cloudinary helpers (signed image deletion) for Tango Berlin.

Usage:
    from services.cloudinary import delete_image

Notes:
- Uses the Upload API "destroy" endpoint with a SHA-1 request signature.
- Credentials come from Flask config: CLOUDINARY_CLOUD_NAME,
  CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET.
- "not found" counts as success: the image is gone either way.
"""
from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from flask import current_app

from helpers.errors import CloudinaryError, ValidationError

DESTROY_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/destroy"
OK_RESULTS = {"ok", "not found"}


@dataclass
class DeleteResult:
    success: bool
    result: Dict[str, Any] = field(default_factory=dict)


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary signature: sorted "key=value" pairs joined by "&", secret appended, SHA-1."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def _credentials() -> tuple:
    cfg = current_app.config
    cloud_name = cfg.get("CLOUDINARY_CLOUD_NAME")
    api_key = cfg.get("CLOUDINARY_API_KEY")
    api_secret = cfg.get("CLOUDINARY_API_SECRET")
    if not cloud_name or not api_key or not api_secret:
        raise CloudinaryError("Cloudinary configuration missing")
    return cloud_name, api_key, api_secret


def delete_image(public_id: str, *, timeout: Optional[float] = None) -> DeleteResult:
    """Delete one image by public_id.

    Raises ValidationError for an empty public_id and CloudinaryError when the
    configuration is missing or the API cannot be reached.
    """
    if not public_id:
        raise ValidationError("Missing public_id")

    cloud_name, api_key, api_secret = _credentials()
    timestamp = int(time.time())
    signed = {"public_id": public_id, "timestamp": timestamp}
    data = {
        **signed,
        "api_key": api_key,
        "signature": sign_params(signed, api_secret),
    }
    timeout = timeout if timeout is not None else current_app.config.get("CLOUDINARY_TIMEOUT", 10.0)

    try:
        resp = requests.post(DESTROY_URL.format(cloud_name=cloud_name), data=data, timeout=timeout)
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        current_app.logger.warning(f"Cloudinary destroy failed for '{public_id}': {e}")
        raise CloudinaryError(f"Cloudinary request failed: {e}") from e

    if payload.get("result") in OK_RESULTS:
        current_app.logger.info(f"Cloudinary image deleted: {public_id} ({payload.get('result')})")
        return DeleteResult(success=True, result=payload)

    current_app.logger.error(f"Error deleting image from Cloudinary: {payload}")
    return DeleteResult(success=False, result=payload)


__all__ = ["DeleteResult", "sign_params", "delete_image"]
