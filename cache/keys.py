# ABOUTME: Cache key derivation for incoming queries using normalized BLAKE2b digests
# ABOUTME: Case and surrounding whitespace are ignored, every other difference yields a new key

import hashlib

KEY_DIGEST_SIZE = 16  # 128-bit digest, 32 hex characters


class CacheKeyGenerator:
    """Generates consistent fixed-length cache keys from query strings."""

    def __init__(self, digest_size: int = KEY_DIGEST_SIZE):
        """Initialize cache key generator."""
        self.digest_size = digest_size

    def generate_key(self, query: str) -> str:
        """Generate a hex cache key from the normalized query."""
        normalized = self.normalize(query)
        if not normalized:
            raise ValueError("Query must be a non-empty string")

        digest = hashlib.blake2b(
            normalized.encode("utf-8"), digest_size=self.digest_size
        )
        return digest.hexdigest()

    @staticmethod
    def normalize(query: str) -> str:
        """Normalize query for exact-match comparison."""
        return query.strip().lower()


_default_generator = CacheKeyGenerator()


def derive_key(query: str) -> str:
    """Derive the cache key for a query with the default generator."""
    return _default_generator.generate_key(query)
