import os
from dotenv import load_dotenv

load_dotenv(override=True)


TRUE_VALUES = ('1', 'true', 'yes', 'on')


def parse_bool(value, default=False):
    """Interpret a flag from app.config or the environment; strings like "false" are False."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


def _env_bool(name, default=False):
    return parse_bool(os.getenv(name), default)


class Config:
    """
    Base configuration for Loomline.
    Projects override any of these through environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(DB_DIR, 'catalog.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Media host: 'cloudinary' or 'local'
    MEDIA_STORAGE = os.getenv('MEDIA_STORAGE', 'local')
    MEDIA_LOCAL_SUBFOLDER = os.getenv('MEDIA_LOCAL_SUBFOLDER', 'products')

    # Cloudinary settings
    CLOUDINARY_CLOUD_NAME = os.getenv('CLOUDINARY_CLOUD_NAME')
    CLOUDINARY_API_KEY = os.getenv('CLOUDINARY_API_KEY')
    CLOUDINARY_API_SECRET = os.getenv('CLOUDINARY_API_SECRET')
    CLOUDINARY_FOLDER = os.getenv('CLOUDINARY_FOLDER', 'products')
    MEDIA_UPLOAD_TIMEOUT = int(os.getenv('MEDIA_UPLOAD_TIMEOUT', '30'))

    # Media validation
    MAX_UPLOAD_BYTES = int(os.getenv('MAX_UPLOAD_BYTES', str(10 * 1024 * 1024)))
    MAX_VIDEO_SECONDS = float(os.getenv('MAX_VIDEO_SECONDS', '100'))
    MEDIA_REQUIRED_ON_CREATE = _env_bool('MEDIA_REQUIRED_ON_CREATE', False)

    # Storefront listings
    FEATURED_LIMIT = int(os.getenv('FEATURED_LIMIT', '8'))
    RELATED_LIMIT = int(os.getenv('RELATED_LIMIT', '4'))

    # Origins allowed to call the public catalog API
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://localhost:5000').split(',')
        if origin.strip()
    ]

    # Port for local server (optional, projects can set this)
    port = int(os.getenv('PORT', '5000'))


# Keys copied into app.config by Loomline.init_app when the host app has not set them
CONFIG_KEYS = [
    'SECRET_KEY',
    'DB_DIR',
    'SQLALCHEMY_DATABASE_URI',
    'SQLALCHEMY_TRACK_MODIFICATIONS',
    'MEDIA_STORAGE',
    'MEDIA_LOCAL_SUBFOLDER',
    'CLOUDINARY_CLOUD_NAME',
    'CLOUDINARY_API_KEY',
    'CLOUDINARY_API_SECRET',
    'CLOUDINARY_FOLDER',
    'MEDIA_UPLOAD_TIMEOUT',
    'MAX_UPLOAD_BYTES',
    'MAX_VIDEO_SECONDS',
    'MEDIA_REQUIRED_ON_CREATE',
    'FEATURED_LIMIT',
    'RELATED_LIMIT',
    'CORS_ORIGINS',
]


def get_config(key, default=None):
    """Get config value: app.config > Config class > env var."""
    try:
        from flask import current_app
        if key in current_app.config:
            return current_app.config[key]
    except RuntimeError:
        pass
    if hasattr(Config, key):
        return getattr(Config, key)
    return os.getenv(key, default)
