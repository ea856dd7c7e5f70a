"""Password hashing helpers backed by Flask-Bcrypt."""

from reflectai.extensions import bcrypt


def hash_password(plain_password: str) -> str:
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.check_password_hash(hashed_password, plain_password)
    except ValueError:
        # Malformed stored hash (e.g. seeded placeholder rows).
        return False
