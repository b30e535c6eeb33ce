"""Random slug generation.

Slugs are drawn from a 62-symbol alphabet using nanoid's mask-and-reject
method: each random byte is masked to the next power of two above the
alphabet size and bytes that land outside the alphabet are discarded, so
every symbol is equally likely. The random-byte source is a plain callable
``(n) -> bytes`` so tests can feed a fixed sequence and force collisions.
"""

from collections.abc import Callable

from nanoid.algorithm import algorithm_generate
from nanoid.method import method

__all__ = ["SLUG_ALPHABET", "DEFAULT_SLUG_LENGTH", "RandomBytes", "generate_slug", "SlugGenerator"]

SLUG_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_SLUG_LENGTH = 6

RandomBytes = Callable[[int], bytes]


def generate_slug(length: int = DEFAULT_SLUG_LENGTH, random_bytes: RandomBytes | None = None) -> str:
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise ValueError(f"length must be a positive integer, got {length!r}")
    return method(random_bytes or algorithm_generate, SLUG_ALPHABET, length)


class SlugGenerator:
    """Slug source bound to a length and a random-byte provider.

    Example:
        >>> generator = SlugGenerator(length=6)
        >>> len(generator())
        6
    """

    def __init__(self, length: int = DEFAULT_SLUG_LENGTH, random_bytes: RandomBytes | None = None) -> None:
        if length <= 0:
            raise ValueError(f"length must be a positive integer, got {length!r}")
        self.length = length
        self._random_bytes = random_bytes

    def __call__(self) -> str:
        return generate_slug(self.length, self._random_bytes)
