"""
Document containers and data URI helpers.

Remote services receive documents as base64 data URIs
(``data:<mimetype>;base64,<encoded_data>``).
"""
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import aiofiles

from .exceptions import FileReadError, InvalidDataUriError

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_PATTERN = re.compile(r'^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*?);base64,(?P<data>.*)$', re.DOTALL)

# Office formats are not always registered with the mimetypes module
_EXTRA_MIME_TYPES = {
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.pptx': 'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.doc': 'application/msword',
    '.ppt': 'application/vnd.ms-powerpoint',
    '.xls': 'application/vnd.ms-excel',
    '.pdf': 'application/pdf',
    '.txt': 'text/plain',
    '.md': 'text/markdown',
    '.srt': 'text/plain',
}


def guess_mime_type(filename: str) -> str:
    """Guess a document MIME type from its filename"""
    suffix = Path(filename).suffix.lower()
    if suffix in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


def build_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI"""
    encoded = base64.b64encode(data).decode('ascii')
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    Decode a base64 data URI.

    Returns:
        Tuple of (mime_type, raw bytes)

    Raises:
        InvalidDataUriError: If the URI is not a base64 data URI
    """
    if not data_uri:
        raise InvalidDataUriError("Document data URI is empty")
    match = _DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise InvalidDataUriError(
            "Expected format: 'data:<mimetype>;base64,<encoded_data>'",
            context={'prefix': data_uri[:40]}
        )
    try:
        data = base64.b64decode(match.group('data'), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataUriError(f"Invalid base64 payload: {e}") from e
    return match.group('mime') or DEFAULT_MIME_TYPE, data


def data_uri_payload(data_uri: str) -> str:
    """Base64 payload of a data URI (the part after the comma)"""
    parse_data_uri(data_uri)
    return data_uri.split(',', 1)[1]


@dataclass
class DocumentFile:
    """An uploaded document held in memory"""
    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def data_uri(self) -> str:
        return build_data_uri(self.data, self.mime_type)

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, mime_type: str = None) -> 'DocumentFile':
        return cls(filename=filename, mime_type=mime_type or guess_mime_type(filename), data=data)

    @classmethod
    def from_data_uri(cls, data_uri: str, filename: str) -> 'DocumentFile':
        mime_type, data = parse_data_uri(data_uri)
        return cls(filename=filename, mime_type=mime_type, data=data)

    @classmethod
    async def from_path(cls, path, mime_type: str = None) -> 'DocumentFile':
        """Read a document from disk"""
        path = Path(path)
        try:
            async with aiofiles.open(path, 'rb') as f:
                data = await f.read()
        except OSError as e:
            raise FileReadError(f"Failed to read the file: {e}", context={'path': str(path)}) from e
        return cls.from_bytes(data, path.name, mime_type)


def translated_filename(filename: str, target_language: str) -> str:
    """
    Download name for a translated document.

    Examples:
        report.docx, 'es' -> report_translated_to_es.docx
        notes, 'fr' -> notes_translated_to_fr
    """
    if '.' in filename:
        stem, ext = filename.rsplit('.', 1)
        ext = '.' + ext
    else:
        stem, ext = filename, ''
    return f"{stem}_translated_to_{target_language}{ext}"


def get_unique_output_path(output_path):
    """
    Generate a unique output path by adding a number suffix if the file already exists.

    Args:
        output_path (str): Desired output path

    Returns:
        str: Unique output path (original or with numeric suffix)

    Examples:
        report.pdf -> report.pdf (if doesn't exist)
        report.pdf -> report (1).pdf (if report.pdf exists)
    """
    path = Path(output_path)

    if not path.exists():
        return str(output_path)

    counter = 1
    while True:
        new_path = path.parent / f"{path.stem} ({counter}){path.suffix}"
        if not new_path.exists():
            return str(new_path)

        counter += 1

        # Safety check to avoid infinite loops (highly unlikely)
        if counter > 9999:
            raise RuntimeError(f"Could not find unique filename after 9999 attempts for: {output_path}")
