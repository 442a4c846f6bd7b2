"""
Media Hosts
===========

Product images and videos live on an external media host. Two hosts share
one interface:

- CloudinaryMediaHost: signed calls to the Cloudinary upload API over requests.
- LocalMediaHost: files under the Flask static folder, for development.

Both expose upload(data, desired_id, kind) -> HostedMedia and
delete(asset_id, kind). Failures raise ExternalServiceError.
"""

import os
import time
import hashlib
import logging
from enum import Enum

import requests
from flask import current_app

from .config import get_config
from .errors import ExternalServiceError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


class MediaKind(Enum):
    IMAGE = 'image'
    VIDEO = 'video'

    @classmethod
    def from_value(cls, value):
        """Map a stored column value back to a kind; None for anything else."""
        for kind in cls:
            if kind.value == value:
                return kind
        return None


class HostedMedia:
    """What the host hands back after an upload."""

    def __init__(self, url, asset_id, kind):
        self.url = url
        self.asset_id = asset_id
        self.kind = kind

    def __repr__(self):
        return f"HostedMedia({self.asset_id!r}, {self.url!r})"


class MediaHost:
    """Interface for external media hosts."""

    def upload(self, data, desired_id, kind, content_type=None):
        raise NotImplementedError

    def delete(self, asset_id, kind=MediaKind.IMAGE):
        raise NotImplementedError


class CloudinaryMediaHost(MediaHost):
    """Cloudinary upload API client (signed uploads and destroys)."""

    def __init__(self, cloud_name, api_key, api_secret, folder='products', timeout=30):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout

    def _sign(self, params):
        """Cloudinary signature: sha1 of the sorted, &-joined params plus the secret."""
        to_sign = '&'.join(
            f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, '')
        )
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()

    def _signed(self, params):
        params = dict(params)
        params['timestamp'] = int(time.time())
        params['signature'] = self._sign(params)
        params['api_key'] = self.api_key
        return params

    def _endpoint(self, kind, action):
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/{kind.value}/{action}"

    def upload(self, data, desired_id, kind, content_type=None):
        if not all([self.cloud_name, self.api_key, self.api_secret]):
            raise ExternalServiceError('Media host is not configured')

        params = self._signed({'public_id': desired_id, 'folder': self.folder})
        try:
            resp = requests.post(
                self._endpoint(kind, 'upload'),
                data=params,
                files={'file': (desired_id, data, content_type or 'application/octet-stream')},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            logger.error(f"Cloudinary upload failed for {desired_id}: {e}")
            raise ExternalServiceError('Failed to upload media') from e
        except ValueError as e:
            raise ExternalServiceError('Media host returned an invalid response') from e

        url = payload.get('secure_url') or payload.get('url')
        asset_id = payload.get('public_id')
        if not url or not asset_id:
            raise ExternalServiceError('Media host returned an incomplete response')
        return HostedMedia(url, asset_id, kind)

    def delete(self, asset_id, kind=MediaKind.IMAGE):
        if not asset_id:
            raise ExternalServiceError('No asset id to delete')

        params = self._signed({'public_id': asset_id})
        try:
            resp = requests.post(
                self._endpoint(kind, 'destroy'),
                data=params,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            result = resp.json().get('result')
        except requests.RequestException as e:
            logger.error(f"Cloudinary destroy failed for {asset_id}: {e}")
            raise ExternalServiceError('Failed to delete media') from e
        except ValueError as e:
            raise ExternalServiceError('Media host returned an invalid response') from e

        # "not found" means the asset is already gone
        if result not in ('ok', 'not found'):
            raise ExternalServiceError(f'Media host refused delete: {result}')
        return True


class LocalMediaHost(MediaHost):
    """Save media under <static_folder>/<subfolder>; asset id is the file name."""

    EXTENSIONS = {
        'image/jpeg': 'jpg',
        'image/png': 'png',
        'image/gif': 'gif',
        'video/mp4': 'mp4',
        'video/webm': 'webm',
    }

    def __init__(self, static_folder, subfolder='products'):
        self.static_folder = static_folder
        self.subfolder = subfolder

    def _path(self, asset_id):
        # Asset ids never carry directory parts
        return os.path.join(self.static_folder, self.subfolder, os.path.basename(asset_id))

    def upload(self, data, desired_id, kind, content_type=None):
        default_ext = 'mp4' if kind is MediaKind.VIDEO else 'jpg'
        ext = self.EXTENSIONS.get(content_type, default_ext)
        asset_id = f"{os.path.basename(desired_id)}.{ext}"
        upload_dir = os.path.join(self.static_folder, self.subfolder)
        try:
            os.makedirs(upload_dir, exist_ok=True)
            with open(self._path(asset_id), 'wb') as f:
                f.write(data)
        except OSError as e:
            raise ExternalServiceError('Failed to store media') from e
        return HostedMedia(f"/static/{self.subfolder}/{asset_id}", asset_id, kind)

    def delete(self, asset_id, kind=MediaKind.IMAGE):
        path = self._path(asset_id)
        try:
            if os.path.isfile(path):
                os.unlink(path)
        except OSError as e:
            raise ExternalServiceError('Failed to delete media') from e
        return True


def get_media_host():
    """Build the media host selected by MEDIA_STORAGE for the current app."""
    storage = (get_config('MEDIA_STORAGE') or 'local').lower()
    if storage == 'cloudinary':
        return CloudinaryMediaHost(
            cloud_name=get_config('CLOUDINARY_CLOUD_NAME'),
            api_key=get_config('CLOUDINARY_API_KEY'),
            api_secret=get_config('CLOUDINARY_API_SECRET'),
            folder=get_config('CLOUDINARY_FOLDER', 'products'),
            timeout=int(get_config('MEDIA_UPLOAD_TIMEOUT', 30)),
        )
    return LocalMediaHost(
        current_app.static_folder,
        get_config('MEDIA_LOCAL_SUBFOLDER', 'products'),
    )
