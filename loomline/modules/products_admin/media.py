"""
Product media validation utilities

- File type validation against the allowed MIME types
- File size limit
- Video duration limit, read from the container (MP4 mvhd / WebM Info)
"""

import struct
import logging
from typing import Optional

from ...core.errors import ValidationError
from ...core.storage import MediaKind

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    'image/jpeg': MediaKind.IMAGE,
    'image/png': MediaKind.IMAGE,
    'image/gif': MediaKind.IMAGE,
    'video/mp4': MediaKind.VIDEO,
    'video/webm': MediaKind.VIDEO,
}

# Default limits
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_VIDEO_SECONDS = 100.0

# EBML element ids (marker bits kept)
EBML_HEADER = 0x1A45DFA3
EBML_SEGMENT = 0x18538067
EBML_INFO = 0x1549A966
EBML_TIMECODE_SCALE = 0x2AD7B1
EBML_DURATION = 0x4489


class MediaUpload:
    """An uploaded media file, read fully into memory."""

    def __init__(self, data, content_type, filename=None, reported_duration=None):
        self.data = data or b''
        self.content_type = (content_type or '').split(';')[0].strip().lower()
        self.filename = filename
        self.reported_duration = reported_duration

    @property
    def size(self):
        return len(self.data)

    @classmethod
    def from_file_storage(cls, file_storage, reported_duration=None):
        """Wrap a werkzeug FileStorage from request.files."""
        return cls(
            data=file_storage.read(),
            content_type=file_storage.mimetype or file_storage.content_type,
            filename=file_storage.filename,
            reported_duration=reported_duration,
        )

    def __repr__(self):
        return f"MediaUpload({self.filename!r}, {self.content_type}, {self.size} bytes)"


def validate_upload(upload, max_bytes=DEFAULT_MAX_BYTES, max_video_seconds=DEFAULT_MAX_VIDEO_SECONDS):
    """
    Check an upload and decide its media kind.

    Returns:
        MediaKind of the upload

    Raises:
        ValidationError: empty, too large, unsupported type or too long
    """
    if upload.size == 0:
        raise ValidationError('empty media file')

    if upload.size > max_bytes:
        raise ValidationError('media too large')

    kind = ALLOWED_TYPES.get(upload.content_type)
    if kind is None:
        raise ValidationError('unsupported media type')

    if kind is MediaKind.VIDEO:
        duration = probe_video_duration(upload.data, upload.content_type)
        if duration is None:
            duration = upload.reported_duration
        if duration is None:
            logger.warning(f"Could not determine duration of {upload!r}; accepting it")
        elif duration > max_video_seconds:
            raise ValidationError('media too long')

    return kind


def probe_video_duration(data, content_type) -> Optional[float]:
    """Duration in seconds from the container header, or None if it can't be read."""
    try:
        if content_type == 'video/mp4':
            return _mp4_duration(data)
        if content_type == 'video/webm':
            return _webm_duration(data)
    except (ValueError, IndexError, struct.error) as e:
        logger.info(f"Unreadable {content_type} header: {e}")
    return None


# ---------------------------------------------------------------------------
# MP4 (ISO base media): moov > mvhd carries timescale and duration
# ---------------------------------------------------------------------------

def _mp4_boxes(data, start, end):
    pos = start
    while pos + 8 <= end:
        size, box_type = struct.unpack('>I4s', data[pos:pos + 8])
        header = 8
        if size == 1:
            size = struct.unpack('>Q', data[pos + 8:pos + 16])[0]
            header = 16
        elif size == 0:
            size = end - pos
        if size < header:
            raise ValueError('corrupt box size')
        yield box_type, pos + header, min(pos + size, end)
        pos += size


def _mp4_duration(data):
    for box_type, body, box_end in _mp4_boxes(data, 0, len(data)):
        if box_type != b'moov':
            continue
        for child_type, child_body, _ in _mp4_boxes(data, body, box_end):
            if child_type != b'mvhd':
                continue
            version = data[child_body]
            if version == 1:
                timescale, duration = struct.unpack('>IQ', data[child_body + 20:child_body + 32])
            else:
                timescale, duration = struct.unpack('>II', data[child_body + 12:child_body + 20])
            if not timescale:
                return None
            return duration / timescale
    return None


# ---------------------------------------------------------------------------
# WebM (Matroska/EBML): Segment > Info > TimecodeScale, Duration
# ---------------------------------------------------------------------------

def _read_vint(data, pos, keep_marker):
    """Read an EBML variable-length integer. Returns (value, length, unknown_size)."""
    first = data[pos]
    length = 1
    mask = 0x80
    while length <= 8 and not first & mask:
        mask >>= 1
        length += 1
    if length > 8:
        raise ValueError('invalid EBML vint')
    if pos + length > len(data):
        raise ValueError('truncated EBML vint')

    value = first if keep_marker else first & (mask - 1)
    for byte in data[pos + 1:pos + length]:
        value = (value << 8) | byte
    unknown = not keep_marker and value == (1 << (7 * length)) - 1
    return value, length, unknown


def _ebml_elements(data, start, end):
    pos = start
    while pos < end:
        element_id, id_len, _ = _read_vint(data, pos, keep_marker=True)
        size, size_len, unknown = _read_vint(data, pos + id_len, keep_marker=False)
        body = pos + id_len + size_len
        body_end = end if unknown else min(body + size, end)
        yield element_id, body, body_end
        pos = body_end


def _read_uint(data, start, end):
    value = 0
    for byte in data[start:end]:
        value = (value << 8) | byte
    return value


def _read_float(data, start, end):
    if end - start == 4:
        return struct.unpack('>f', data[start:end])[0]
    if end - start == 8:
        return struct.unpack('>d', data[start:end])[0]
    raise ValueError('invalid EBML float size')


def _webm_duration(data):
    for element_id, body, body_end in _ebml_elements(data, 0, len(data)):
        if element_id != EBML_SEGMENT:
            continue
        for child_id, child_body, child_end in _ebml_elements(data, body, body_end):
            if child_id != EBML_INFO:
                continue
            timecode_scale = 1000000
            duration = None
            for info_id, info_body, info_end in _ebml_elements(data, child_body, child_end):
                if info_id == EBML_TIMECODE_SCALE:
                    timecode_scale = _read_uint(data, info_body, info_end)
                elif info_id == EBML_DURATION:
                    duration = _read_float(data, info_body, info_end)
            if duration is None:
                return None
            return duration * timecode_scale / 1e9
    return None
