"""Registration, login and session resolution."""

import logging

from podcastpro.store.models import DEFAULT_AVATAR_URL, User
from podcastpro.store.repository import Repository
from podcastpro.store.security import hash_password, needs_rehash, verify_password
from podcastpro.store.session import Session
from podcastpro.utils.errors import AuthError, ConflictError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 4


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Account creation and sign-in over the Users collection.

    Args:
        repo: Shared repository
        min_password_length: Shortest password ``register`` accepts
    """

    def __init__(
        self,
        repo: Repository,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ) -> None:
        self.repo = repo
        self.min_password_length = min_password_length

    def register(
        self,
        session: Session,
        name: str,
        email: str,
        nickname: str,
        password: str,
    ) -> User:
        """Create a regular user and sign them in.

        Args:
            session: Session to establish for the new user
            name: Display name
            email: Login email (unique)
            nickname: Public handle (unique, case-insensitive)
            password: Plaintext password, stored only as a hash

        Returns:
            The new User

        Raises:
            ValidationError: If a field is blank or the password is too short
            ConflictError: If the email or nickname is already registered
        """
        if not all(value and value.strip() for value in (name, email, nickname, password)):
            raise ValidationError("All fields are required")

        if len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters"
            )

        email_key = normalize_email(email)
        if self.find_by_email(email_key) is not None:
            raise ConflictError(
                "Email already registered",
                suggestion="Log in instead, or use a different email",
            )

        if self.find_by_nickname(nickname) is not None:
            raise ConflictError(
                "Nickname already taken",
                suggestion="Choose a different handle",
            )

        name = name.strip()
        user = User(
            name=name,
            email=email_key,
            nickname=nickname.strip(),
            role="user",
            photo_url=DEFAULT_AVATAR_URL.format(seed=name),
            description="New User",
            password_hash=hash_password(password),
        )

        with self.repo.transaction():
            self.repo.users[user.id] = user
            self.repo.mark_dirty("users")

        session.set_user(user)
        logger.info(f"Registered user {user.id} ({user.nickname})")
        return user

    def login(self, session: Session, email: str, password: str) -> User:
        """Authenticate and establish the session.

        The seeded administrator (email ``admin``) signs in through this same path.

        Raises:
            AuthError: On any mismatch, with a message that doesn't reveal which field
        """
        if not email or not password:
            raise AuthError()

        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthError()

        if needs_rehash(user.password_hash):
            with self.repo.transaction():
                user.password_hash = hash_password(password)
                self.repo.mark_dirty("users")
            logger.info(f"Upgraded password hash for {user.id}")

        session.set_user(user)
        logger.info(f"User {user.id} logged in")
        return user

    def logout(self, session: Session) -> None:
        """Clear the session pointer. No entity is touched."""
        session.clear()

    def current_user(self, session: Session) -> User | None:
        """Resolve the session to the live user record, if any."""
        if session.user_id is None:
            return None
        return self.repo.users.get(session.user_id)

    def get_user(self, user_id: str) -> User | None:
        return self.repo.users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        email_key = normalize_email(email)
        for user in self.repo.users.values():
            if normalize_email(user.email) == email_key:
                return user
        return None

    def find_by_nickname(self, nickname: str) -> User | None:
        handle = nickname.strip().lower()
        for user in self.repo.users.values():
            if user.nickname.strip().lower() == handle:
                return user
        return None
