import math
from typing import AbstractSet, Sequence

from model import CommonShingle, SimilarityLevel, SimilarityResult


def intersection(set1: AbstractSet, set2: AbstractSet) -> set:
    """
    Compute A ∩ B, iterating over the smaller of both sets.
    """
    smaller, larger = (set1, set2) if len(set1) < len(set2) else (set2, set1)
    return {item for item in smaller if item in larger}


def union(set1: AbstractSet, set2: AbstractSet) -> set:
    """
    Compute A ∪ B.
    """
    result = set(set1)
    result.update(set2)
    return result


def difference(set1: AbstractSet, set2: AbstractSet) -> set:
    """
    Compute A \\ B, the elements of set1 missing from set2.
    """
    return {item for item in set1 if item not in set2}


def jaccard_similarity(set1: AbstractSet, set2: AbstractSet) -> float:
    """
    Jaccard similarity |A ∩ B| / |A ∪ B|.

    Two empty sets are identical and score 1.0.
    """
    if not set1 and not set2:
        return 1.0
    return len(intersection(set1, set2)) / len(union(set1, set2))


def overlap_coefficient(set1: AbstractSet, set2: AbstractSet) -> float:
    """
    Overlap (Szymkiewicz-Simpson) coefficient |A ∩ B| / min(|A|, |B|).

    Nothing overlaps with an empty set, so an empty side scores 0.0,
    even if both sides are empty.
    """
    if not set1 or not set2:
        return 0.0
    return len(intersection(set1, set2)) / min(len(set1), len(set2))


def cosine_similarity(set1: AbstractSet, set2: AbstractSet) -> float:
    """
    Cosine similarity of the sets seen as binary vectors: |A ∩ B| / sqrt(|A| * |B|).
    """
    if not set1 or not set2:
        return 0.0
    return len(intersection(set1, set2)) / math.sqrt(len(set1) * len(set2))


def dice_coefficient(set1: AbstractSet, set2: AbstractSet) -> float:
    """
    Sørensen-Dice coefficient 2|A ∩ B| / (|A| + |B|). Two empty sets score 1.0.
    """
    if not set1 and not set2:
        return 1.0
    return 2 * len(intersection(set1, set2)) / (len(set1) + len(set2))


def compute_all_similarities(set1: AbstractSet, set2: AbstractSet) -> SimilarityResult:
    return SimilarityResult(
        jaccard_similarity=jaccard_similarity(set1, set2),
        cosine_similarity=cosine_similarity(set1, set2),
        overlap_coefficient=overlap_coefficient(set1, set2),
        dice_coefficient=dice_coefficient(set1, set2),
        intersection_size=len(intersection(set1, set2)),
        union_size=len(union(set1, set2)),
        set1_size=len(set1),
        set2_size=len(set2),
    )


def classify_similarity(similarity: float) -> SimilarityLevel:
    """
    Map a similarity score in [0, 1] to a similarity band.
    The lower bound of each band is inclusive.
    """
    if similarity >= 0.8:
        return SimilarityLevel.VERY_HIGH
    elif similarity >= 0.6:
        return SimilarityLevel.HIGH
    elif similarity >= 0.4:
        return SimilarityLevel.MEDIUM
    elif similarity >= 0.2:
        return SimilarityLevel.LOW
    else:
        return SimilarityLevel.NONE


def _positions(shingles: Sequence[str]) -> dict[str, list[int]]:
    positions = {}
    for index, shingle in enumerate(shingles):
        positions.setdefault(shingle, []).append(index)
    return positions


def find_common_shingles(shingles1: Sequence[str], shingles2: Sequence[str]) -> list[CommonShingle]:
    """
    Find shingles occurring in both sequences, used to highlight matching text.

    Args:
        shingles1: Shingles of the first document, in text order
        shingles2: Shingles of the second document, in text order

    Returns:
        One record per common shingle, in order of first occurrence in shingles1
    """
    positions1 = _positions(shingles1)
    positions2 = _positions(shingles2)

    return [
        CommonShingle(shingle, tuple(indices), tuple(positions2[shingle]))
        for shingle, indices in positions1.items()
        if shingle in positions2
    ]
