import asyncio

import bcrypt

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= BCRYPT_MAX_BYTES


class PasswordHasher:
    """Salted bcrypt hashing.

    Hashing and verification run in a worker thread so a slow cost factor does
    not stall the event loop.
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash_sync(self, password: str) -> str:
        """Hash a password.

        Raises:
            ValueError: If the password is longer than bcrypt can tell apart
        """
        if not fits_bcrypt(password):
            raise ValueError(f"Password is longer than {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify_sync(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Over-long passwords never match."""
        encoded = password.encode("utf-8")
        try:
            matches = bcrypt.checkpw(encoded[:BCRYPT_MAX_BYTES], password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
        return matches and len(encoded) <= BCRYPT_MAX_BYTES

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify_sync, password, password_hash)

    async def verify_dummy(self, password: str) -> None:
        """Spend the same time as a real verification when there is no hash to check against."""
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash("dummy-password")
        await self.verify(password, self._dummy_hash)
