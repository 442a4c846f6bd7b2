"""Shared fixtures for the Loomline test suite."""

import os
import shutil
import struct
import tempfile
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from flask import Flask

from loomline import Loomline
from loomline.core.storage import HostedMedia
from loomline.modules.catalog.models import Product


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="loomline-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def media_host():
    """Stand-in for the external media host; uploads always succeed."""
    host = MagicMock()
    host.upload.side_effect = lambda data, desired_id, kind, content_type=None: HostedMedia(
        f"https://media.example.com/{kind.value}/products/{desired_id}",
        f"products/{desired_id}",
        kind,
    )
    host.delete.return_value = True
    return host


@pytest.fixture
def app(tmp_db_dir, media_host):
    """Flask app with Loomline registered against a throwaway SQLite file."""
    app = Flask(__name__, static_folder=os.path.join(tmp_db_dir, "static"))
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(tmp_db_dir, "catalog.db")
    app.config["MEDIA_STORAGE"] = "local"

    Loomline(app, media_host_factory=lambda: media_host)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client carrying an admin session."""
    with client.session_transaction() as sess:
        sess["admin_id"] = 1
    return client


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_product():
    """Factory for unsaved Product rows with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "id": f"p{counter['n']}",
            "name": f"Machine {counter['n']}",
            "description": "Industrial nylon machine",
            "category": "Extruders",
            "price": "$10,000",
            "original_price": None,
            "features": [],
            "specifications": {},
            "featured": False,
            "in_stock": True,
            "discount": 0,
            "rating": 4.0,
            "reviews": 0,
            "created_at": datetime(2024, 1, counter["n"] % 28 + 1),
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


def mp4_bytes(seconds, timescale=1000):
    """Minimal MP4: ftyp + moov/mvhd (version 0) declaring the given duration."""
    mvhd_body = b"\x00\x00\x00\x00" + struct.pack(">IIII", 0, 0, timescale, int(seconds * timescale)) + b"\x00" * 80
    mvhd = struct.pack(">I4s", 8 + len(mvhd_body), b"mvhd") + mvhd_body
    moov = struct.pack(">I4s", 8 + len(mvhd), b"moov") + mvhd
    ftyp = struct.pack(">I4s4sI", 16, b"ftyp", b"isom", 512)
    return ftyp + moov


def webm_bytes(seconds):
    """Minimal WebM: EBML header + Segment(unknown size)/Info with TimecodeScale and Duration."""
    timecode_scale = b"\x2a\xd7\xb1\x83\x0f\x42\x40"  # 1,000,000 ns
    duration = b"\x44\x89\x88" + struct.pack(">d", seconds * 1000.0)
    info_body = timecode_scale + duration
    info = b"\x15\x49\xa9\x66" + bytes([0x80 | len(info_body)]) + info_body
    segment = b"\x18\x53\x80\x67" + b"\x01\xff\xff\xff\xff\xff\xff\xff" + info
    return b"\x1a\x45\xdf\xa3\x80" + segment


JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES


@pytest.fixture
def video_factory():
    return {"mp4": mp4_bytes, "webm": webm_bytes}
