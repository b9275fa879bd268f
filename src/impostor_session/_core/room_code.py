# Area: Core
"""Room code generation and normalisation."""

from .random_source import RandomSource

ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def generate_room_code(
    rng: RandomSource,
    length: int = ROOM_CODE_LENGTH,
    alphabet: str = ROOM_CODE_ALPHABET,
) -> str:
    """Draw a fixed-length code from ``alphabet``."""
    return "".join(rng.choice(alphabet) for _ in range(length))


def normalize_room_code(code: str) -> str:
    """Codes are typed by hand: ignore surrounding whitespace and case."""
    return code.strip().upper()


def is_valid_room_code(
    code: str,
    length: int = ROOM_CODE_LENGTH,
    alphabet: str = ROOM_CODE_ALPHABET,
) -> bool:
    return len(code) == length and all(c in alphabet for c in code)
