import bcrypt

from app.config import settings

# bcrypt only reads the first 72 bytes of a secret
MAX_SECRET_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode()[:MAX_SECRET_BYTES]


class BcryptHasher:
    """bcrypt password hashing."""

    def __init__(self, rounds: int = settings.BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode())
        except ValueError:
            # Stored value is not a bcrypt hash
            return False
