"""
Create-request parsing.

POST /api/projects/create takes two shapes:
  • multipart/form-data — an optional cover image under "coverImage" and
    the remaining fields as a JSON string under "data";
  • a JSON body holding the fields directly.

read_submission() looks at the content type exactly once and returns a
tagged variant. Both variants expose the same two things — cover_image
and payload() — so nothing downstream branches on the request shape.

payload() is lazy: the embedded JSON is only decoded after the upload has
been validated, so a bad file is reported as such even if "data" is broken.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from starlette.datastructures import UploadFile

from app.core.errors import UploadValidationError
from app.services.uploads import (
    COVER_IMAGE_FIELD,
    MAX_IMAGE_BYTES,
    UNEXPECTED_FIELD_MESSAGE,
    CoverImage,
)

DATA_FIELD = "data"


@dataclass(frozen=True, slots=True)
class JsonSubmission:
    """Fields sent directly as the request body. Never carries a file."""

    body: Any
    cover_image: None = None

    def payload(self) -> Any:
        return self.body


@dataclass(frozen=True, slots=True)
class MultipartSubmission:
    """Form upload: optional cover image plus a JSON-encoded "data" field."""

    data: str | None
    cover_image: CoverImage | None

    def payload(self) -> Any:
        """
        Decode the "data" field; a form without one has no fields.

        Raises:
            json.JSONDecodeError: If "data" is not valid JSON.
        """
        if self.data is None:
            return {}
        return json.loads(self.data)


Submission = JsonSubmission | MultipartSubmission


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", maxsplit=1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_submission(request: Request) -> Submission:
    """
    Parse the request into one of the two submission variants.

    Bodies that are neither multipart nor JSON carry no fields.

    Raises:
        UploadValidationError: If a file arrives under any field other than
            "coverImage", or more than one cover image is sent.
        json.JSONDecodeError: If a JSON body is malformed.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.lower().startswith("multipart/form-data"):
        return await _read_multipart(request)

    if _is_json(content_type):
        raw = await request.body()
        return JsonSubmission(body=json.loads(raw) if raw else {})

    return JsonSubmission(body={})


async def _read_multipart(request: Request) -> MultipartSubmission:
    data: str | None = None
    cover_image: CoverImage | None = None

    async with request.form() as form:
        for field, value in form.multi_items():
            if isinstance(value, UploadFile):
                # browsers send an empty part when no file was chosen
                if not value.filename:
                    continue
                if field != COVER_IMAGE_FIELD or cover_image is not None:
                    raise UploadValidationError(UNEXPECTED_FIELD_MESSAGE)
                cover_image = CoverImage(
                    filename=value.filename,
                    content_type=value.content_type or "",
                    content=await value.read(MAX_IMAGE_BYTES + 1),
                )
            elif field == DATA_FIELD:
                data = value

    return MultipartSubmission(data=data, cover_image=cover_image)
