"""
Authentication service for JWT token management and password hashing.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import get_settings
from ..exceptions import AuthenticationError, ConflictError
from ..models.client import Admin, Client

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

CLIENT = "client"
ADMIN = "admin"


class AuthService:
    """Service for authentication operations."""

    def __init__(self):
        """Initialize auth service with settings."""
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_token_expire_minutes = settings.access_token_expire_minutes

    # Password operations
    def hash_password(self, password: str) -> str:
        """Hash a plain password."""
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return pwd_context.verify(plain_password, hashed_password)

    # Token operations
    def create_access_token(self, subject_id: str, email: str, role: str) -> str:
        """Create a new access token for a client or an admin."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.access_token_expire_minutes)
        to_encode = {
            "sub": subject_id,
            "email": email,
            "role": role,
            "exp": expire,
            "type": "access"
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """
        Decode and validate a JWT token.

        Returns:
            Decoded token payload or None if invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return payload
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            return None

    def verify_access_token(self, token: str, role: str) -> Optional[dict]:
        """Verify an access token for ``role`` and return payload if valid."""
        payload = self.decode_token(token)
        if payload and payload.get("type") == "access" and payload.get("role") == role:
            return payload
        return None

    # Client operations
    def authenticate_client(self, db: Session, email: str, password: str) -> Client:
        """
        Authenticate a client by email and password.

        Raises:
            AuthenticationError: Same message for unknown email and wrong password
        """
        client = self.get_client_by_email(db, email)
        if not client or not client.is_active or not self.verify_password(password, client.hashed_password):
            raise AuthenticationError("Invalid credentials")
        return client

    def register_client(self, db: Session, first_name: str, last_name: str, email: str, password: str) -> Client:
        """
        Create a new client.

        Raises:
            ConflictError: Email already registered
        """
        if self.get_client_by_email(db, email):
            raise ConflictError("Email already in use")

        client = Client(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.lower(),
            hashed_password=self.hash_password(password),
        )
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    def change_password(self, db: Session, account, old_password: str, new_password: str) -> None:
        """Change a client's or admin's password after checking the old one."""
        if not self.verify_password(old_password, account.hashed_password):
            raise AuthenticationError("Old password is incorrect")
        account.hashed_password = self.hash_password(new_password)
        db.commit()

    def get_client_by_id(self, db: Session, client_id: str) -> Optional[Client]:
        """Get a client by ID."""
        return db.query(Client).filter(Client.id == client_id).first()

    def get_client_by_email(self, db: Session, email: str) -> Optional[Client]:
        """Get a client by email."""
        return db.query(Client).filter(Client.email == email.lower()).first()

    # Admin operations
    def authenticate_admin(self, db: Session, email: str, password: str) -> Admin:
        admin = db.query(Admin).filter(Admin.email == email.lower()).first()
        if not admin or not admin.is_active or not self.verify_password(password, admin.hashed_password):
            raise AuthenticationError("Invalid credentials")
        return admin

    def create_admin(self, db: Session, email: str, password: str) -> Admin:
        admin = Admin(email=email.lower(), hashed_password=self.hash_password(password))
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    def get_admin_by_id(self, db: Session, admin_id: str) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.id == admin_id).first()

    def ensure_default_admin(self, db: Session, email: str, password: str) -> Optional[Admin]:
        """Create the configured default admin unless it already exists."""
        if db.query(Admin).filter(Admin.email == email.lower()).first():
            logger.info("Default admin already exists")
            return None
        admin = self.create_admin(db, email, password)
        logger.info(f"Default admin created: {admin.email}")
        return admin


# Singleton instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
