from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from ...core.database import db, Database
from ...core.errors import (
    ValidationError, AuthenticationError, NotFoundError, ConflictError, PersistenceError,
)
from .models import User


class CredentialStore:

    @staticmethod
    def _normalize_email(email):
        return (email or '').strip().lower()

    @staticmethod
    def _hash_password(password):
        """Salted one-way hash (werkzeug scrypt/pbkdf2)"""
        return generate_password_hash(password)

    @staticmethod
    def _verify_password(password, password_hash):
        """Verify password against hash"""
        return check_password_hash(password_hash, password)

    @staticmethod
    def find_by_email(email):
        """Get user by email address"""
        email = CredentialStore._normalize_email(email)
        if not email:
            return None
        try:
            return User.query.filter_by(email=email).first()
        except SQLAlchemyError as e:
            raise PersistenceError('Failed to look up user') from e

    @staticmethod
    def get_user_by_id(user_id):
        """Get user by ID"""
        if user_id is None:
            return None
        return db.session.get(User, user_id)

    @staticmethod
    def register(name, email, password):
        """Create a user. Raises ValidationError or ConflictError."""
        name = (name or '').strip()
        email = CredentialStore._normalize_email(email)
        if not all([name, email, password]):
            raise ValidationError('Missing fields')

        if CredentialStore.find_by_email(email):
            raise ConflictError('Email already in use')

        user = User(name=name, email=email, password_hash=CredentialStore._hash_password(password))
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as e:
            # Lost a race with another sign-up for the same email
            db.session.rollback()
            raise ConflictError('Email already in use') from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError('Failed to create user') from e
        return user

    @staticmethod
    def authenticate(email, password):
        """Verify user login credentials and stamp last_login."""
        if not email or not password:
            raise ValidationError('Missing email or password')

        user = CredentialStore.find_by_email(email)
        if not user:
            raise NotFoundError('User not found')

        if not CredentialStore._verify_password(password, user.password_hash):
            raise AuthenticationError('Invalid password')

        user.last_login = datetime.utcnow()
        Database.commit()
        return user
