"""Unit tests for slug generation."""

import pytest

from shortlink.slug import DEFAULT_SLUG_LENGTH, SLUG_ALPHABET, SlugGenerator, generate_slug


def test_alphabet_is_62_alphanumerics() -> None:
    assert len(SLUG_ALPHABET) == 62
    assert len(set(SLUG_ALPHABET)) == 62
    assert SLUG_ALPHABET.isalnum()


def test_generate_slug_default_length() -> None:
    assert len(generate_slug()) == DEFAULT_SLUG_LENGTH == 6


def test_generate_slug_custom_length() -> None:
    assert len(generate_slug(length=10)) == 10


def test_generate_slug_only_alphanumeric() -> None:
    for _ in range(100):
        assert all(c in SLUG_ALPHABET for c in generate_slug())


def test_generate_slug_uniqueness() -> None:
    slugs = {generate_slug() for _ in range(1000)}
    # With 62^6 possibilities, 1000 slugs should all be unique
    assert len(slugs) == 1000


@pytest.mark.parametrize("length", [0, -1, 2.5, "6"])
def test_generate_slug_rejects_bad_length(length) -> None:
    with pytest.raises(ValueError):
        generate_slug(length=length)


def test_generate_slug_uses_injected_bytes() -> None:
    assert generate_slug(6, lambda size: bytes(size)) == "aaaaaa"
    assert generate_slug(6, lambda size: bytes([61] * size)) == "999999"


def test_generate_slug_skips_bytes_outside_alphabet() -> None:
    # Bytes are masked to 0..63; 62 and 63 have no symbol and are skipped.
    def provider(size: int) -> bytes:
        return bytes([62, 63, 1, 61] + [0] * (size - 4))

    assert generate_slug(2, provider) == "b9"


def test_generate_slug_covers_whole_alphabet() -> None:
    seen = set("".join(generate_slug(12) for _ in range(500)))
    assert seen == set(SLUG_ALPHABET)


def test_slug_generator_callable() -> None:
    generator = SlugGenerator(length=8, random_bytes=lambda size: bytes([2] * size))
    assert generator() == "cccccccc"
    assert generator.length == 8


def test_slug_generator_rejects_bad_length() -> None:
    with pytest.raises(ValueError):
        SlugGenerator(length=0)
