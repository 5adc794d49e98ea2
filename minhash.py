from typing import Iterable

from winnow import HASH_MASK, fnv1a_hash

# Larger than any 32-bit hash, marks a signature slot of an empty element set
EMPTY_SLOT = HASH_MASK + 1


def generate_minhash_signature(elements: Iterable[str], num_hashes: int = 100) -> list[int]:
    """
    Compute a MinHash signature for a set of elements.

    Each of the `num_hashes` hash functions is derived from FNV-1a by appending
    the seed index to the element before hashing. The probability that two
    signatures agree in a slot approximates the Jaccard similarity of the sets.

    Args:
        elements: Shingles (or other strings) describing a document
        num_hashes: Length of the signature

    Returns:
        The signature, one minimum hash per seed
    """
    if num_hashes <= 0:
        raise ValueError(f"Number of hash functions must be positive, got {num_hashes}")

    elements = list(set(elements))
    signature = []
    for seed in range(num_hashes):
        suffix = str(seed)
        signature.append(min((fnv1a_hash(element + suffix) for element in elements), default=EMPTY_SLOT))
    return signature


def estimate_similarity(signature1: list[int], signature2: list[int]) -> float:
    """
    Estimate Jaccard similarity as the share of matching signature slots.
    """
    if len(signature1) != len(signature2):
        raise ValueError(f"Signatures must have same length ({len(signature1)} != {len(signature2)})")
    if not signature1:
        raise ValueError("Signatures must not be empty")

    matches = sum(1 for a, b in zip(signature1, signature2) if a == b)
    return matches / len(signature1)
