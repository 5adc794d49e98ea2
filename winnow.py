from collections import deque
from typing import Callable, Iterable

from normalizers import normalize, tokenize

FNV_OFFSET_BASIS = 0x811c9dc5
FNV_PRIME = 0x01000193
HASH_MASK = 0xFFFFFFFF

POLYNOMIAL_BASE = 31
POLYNOMIAL_MODULUS = 10**9 + 9

HashFunction = Callable[[str], int]


def _code_units(text: str):
    """
    Yield the UTF-16 code units of a string so that hashes agree with
    implementations that hash UTF-16 strings.
    """
    for char in text:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def get_kgrams(text: str, k: int = 5) -> list[str]:
    """
    Generate a list of character k-grams from the input text.
    The text is normalized before the window slides over it.

    Args:
        text: The input text to generate k-grams from
        k: The length of each k-gram

    Returns:
        A list of all possible k-grams, empty if the text is shorter than k
    """
    if k <= 0:
        raise ValueError(f"k-gram size must be positive, got {k}")

    text = normalize(text)
    return [text[i:i + k] for i in range(len(text) - k + 1)]


def get_word_ngrams(text: str, n: int = 3) -> list[str]:
    """
    Generate word n-grams (shingles) from the input text.

    Args:
        text: The input text
        n: Number of words per shingle

    Returns:
        A list of shingles made of n words joined by single spaces
    """
    if n <= 0:
        raise ValueError(f"Word n-gram size must be positive, got {n}")

    words = tokenize(text)
    return [' '.join(words[i:i + n]) for i in range(len(words) - n + 1)]


def fnv1a_hash(shingle: str) -> int:
    """
    32-bit FNV-1a hash of a shingle.

    Args:
        shingle (str): The string to hash.

    Returns:
        int: Unsigned 32-bit hash value.
    """
    h = FNV_OFFSET_BASIS
    for unit in _code_units(shingle):
        h ^= unit
        h = (h * FNV_PRIME) & HASH_MASK
    return h


def polynomial_hash(shingle: str) -> int:
    """
    Polynomial hash sum(c_i * 31^i) mod 1e9+9.

    Args:
        shingle (str): The string to hash.

    Returns:
        int: Hash value in [0, 1e9+9).
    """
    h = 0
    power = 1
    for unit in _code_units(shingle):
        h = (h + unit * power) % POLYNOMIAL_MODULUS
        power = (power * POLYNOMIAL_BASE) % POLYNOMIAL_MODULUS
    return h


HASH_FUNCTIONS = {
    "fnv1a": fnv1a_hash,
    "polynomial": polynomial_hash,
}


def get_hash_function(name: str) -> HashFunction:
    if name in HASH_FUNCTIONS:
        return HASH_FUNCTIONS[name]
    else:
        raise ValueError(f"Unsupported hash function: {name}")


def hash_shingles(shingles: Iterable[str], hash_function: HashFunction = fnv1a_hash) -> list[int]:
    """
    Hash every shingle, keeping the order of the input sequence.
    """
    return [hash_function(shingle) for shingle in shingles]


def generate_fingerprints(shingles: Iterable[str], hash_function: HashFunction = fnv1a_hash) -> set[int]:
    """
    Build the fingerprint set of a document from all of its shingles.
    Duplicate shingles collapse into a single fingerprint.
    """
    return set(hash_shingles(shingles, hash_function))


def select_fingerprints(hashes: list[int], window_size: int = 4) -> set[int]:
    """
    Select fingerprints using the Winnowing algorithm.

    From the ordered hash sequence, the minimum value of every window of
    `window_size` consecutive hashes is kept. Only values are returned, so
    equal minima in a window count once.

    Args:
        hashes (list[int]): Hash values in shingle order.
        window_size (int): Size of the sliding window (w > 0).

    Returns:
        set[int]: The selected fingerprint hashes. Empty if fewer than
        `window_size` hashes are given.
    """
    if window_size <= 0:
        raise ValueError(f"Winnowing window size must be positive, got {window_size}")

    fingerprints = set()
    # Indices of candidate minima, values increasing from left to right
    candidates = deque()

    for i, value in enumerate(hashes):
        while candidates and hashes[candidates[-1]] >= value:
            candidates.pop()
        candidates.append(i)

        if candidates[0] <= i - window_size:
            candidates.popleft()

        if i >= window_size - 1:
            fingerprints.add(hashes[candidates[0]])

    return fingerprints


def generate_winnowing_fingerprints(shingles: list[str], window_size: int = 4,
                                    hash_function: HashFunction = fnv1a_hash) -> set[int]:
    """
    Hash the shingles in order and winnow the hash sequence.

    Any run of at least `window_size` identical shingles shared by two
    documents yields at least one common fingerprint.
    """
    return select_fingerprints(hash_shingles(shingles, hash_function), window_size)
