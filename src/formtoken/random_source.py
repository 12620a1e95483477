"""
Random string sources for token generation.
"""
import random
import secrets
from abc import ABC, abstractmethod
from ..core.config import DEFAULT_ALPHABET

class RandomStringSource(ABC):
    """
    Produces fixed-length strings drawn from an alphabet.
    """
    def __init__(self, alphabet: str = DEFAULT_ALPHABET):
        if len(set(alphabet)) < 2:
            raise ValueError("alphabet needs at least two distinct characters")
        self.alphabet = alphabet

    @abstractmethod
    def generate(self, length: int) -> str:
        pass

class SecretRandomSource(RandomStringSource):
    """
    Cryptographically secure source backed by the OS CSPRNG.
    """
    def generate(self, length: int) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(length))

class SeededRandomSource(RandomStringSource):
    """
    Wrapper around random.Random with explicit seed.
    Reproducible and therefore guessable: tests and replays only.
    """
    def __init__(self, seed: int, alphabet: str = DEFAULT_ALPHABET):
        super().__init__(alphabet)
        self._seed = seed
        self._rng = random.Random(seed)

    def generate(self, length: int) -> str:
        return "".join(self._rng.choice(self.alphabet) for _ in range(length))

    def get_seed(self) -> int:
        return self._seed
