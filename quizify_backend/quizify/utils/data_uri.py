"""
Helpers for self-describing blobs of the form ``data:<mimetype>;base64,<payload>``.
"""
import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

import filetype

from quizify.errors import InputValidationError, UndeterminedFileTypeError

_DATA_URI_HEADER = re.compile(r"^data:(.*?);base64,")


@dataclass(frozen=True)
class DataUri:
    """A decoded blob and the media type it declared, if any."""

    declared_type: Optional[str]
    data: bytes


# PUBLIC_INTERFACE
def encode_data_uri(data: bytes, content_type: str) -> str:
    """Encode raw bytes as a base64 data URI declaring `content_type`."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


# PUBLIC_INTERFACE
def parse_data_uri(value: str) -> DataUri:
    """
    Split a data URI into its declared media type and decoded payload.

    A URI without a recognizable ``data:<type>;base64,`` header is tolerated: the
    text after the first comma (or the whole string when there is none) is treated
    as the base64 payload and the declared type is None.

    Raises:
        InputValidationError: if the value is empty or the payload is not valid base64.
    """
    if not value or not value.strip():
        raise InputValidationError("fileDataUri is required")

    match = _DATA_URI_HEADER.match(value)
    if match:
        # Drop media type parameters such as ";name=notes.pdf".
        declared = match.group(1).split(";")[0].strip() or None
        payload = value[match.end():]
    else:
        declared = None
        payload = value[value.find(",") + 1:]

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError("File data is not valid base64") from exc
    return DataUri(declared_type=declared, data=data)


# PUBLIC_INTERFACE
def resolve_media_type(blob: DataUri) -> str:
    """
    Pick the media type to send upstream: the declared one when present, otherwise
    the type inferred from the payload's magic bytes.

    Raises:
        UndeterminedFileTypeError: if nothing was declared and inference fails.
    """
    if blob.declared_type:
        return blob.declared_type
    kind = filetype.guess(blob.data) if blob.data else None
    if kind is None:
        raise UndeterminedFileTypeError()
    return kind.mime
