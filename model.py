import enum
import hashlib
import random
import string
import time
from dataclasses import dataclass, field


class DocumentType(str, enum.Enum):
    """
    Origin of a document's text
    """
    FILE = "file"
    URL = "url"


def generate_document_id() -> str:
    """
    Generate a unique document identifier
    :return: Identifier of the form doc_<milliseconds>_<random suffix>
    """
    suffix = "".join(random.choice(string.ascii_lowercase + string.digits) for _ in range(9))
    return f"doc_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True)
class Document(object):
    """
    A text document to check for plagiarism
    """
    id: str
    name: str
    content: str
    type: DocumentType = DocumentType.FILE
    source: str = ""

    @classmethod
    def from_text(cls, name: str, content: str, document_type: DocumentType = DocumentType.FILE,
                  source: str = None) -> "Document":
        """
        Create a document with a generated identifier
        :param name: Display name of the document
        :param content: Raw text of the document
        :param document_type: Origin of the text
        :param source: Path or URL the text came from (defaults to the name)
        :return: The new document
        """
        return cls(generate_document_id(), name, content, document_type, source if source is not None else name)

    @classmethod
    def from_path(cls, path: str, content: str) -> "Document":
        """
        Create a document for a file, the identifier is derived from the path
        so that repeated runs over the same files yield the same identifiers
        """
        identifier = hashlib.md5(path.encode()).hexdigest()
        name = path.replace("\\", "/").rsplit("/", 1)[-1]
        return cls(identifier, name, content, DocumentType.FILE, path)


@dataclass(frozen=True)
class DocumentFingerprint(object):
    """
    Fingerprint of a single document, derived by the detection pipeline
    """
    document_id: str
    document_name: str
    content: str
    preprocessed_text: str
    shingles: tuple[str, ...]
    fingerprints: frozenset[int]


class SimilarityLevel(str, enum.Enum):
    """
    Discrete similarity bands, ordered from lowest to highest
    """
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]

    @property
    def level(self) -> str:
        return self.value


_LEVEL_LABELS = {
    SimilarityLevel.NONE: "Minimal Similarity",
    SimilarityLevel.LOW: "Low Similarity",
    SimilarityLevel.MEDIUM: "Medium Similarity",
    SimilarityLevel.HIGH: "High Similarity",
    SimilarityLevel.VERY_HIGH: "Very High Similarity",
}


@dataclass(frozen=True)
class SimilarityResult(object):
    jaccard_similarity: float
    cosine_similarity: float
    overlap_coefficient: float
    dice_coefficient: float
    intersection_size: int
    union_size: int
    set1_size: int
    set2_size: int

    def to_dict(self) -> dict:
        return {
            "jaccardSimilarity": self.jaccard_similarity,
            "cosineSimilarity": self.cosine_similarity,
            "overlapCoefficient": self.overlap_coefficient,
            "diceCoefficient": self.dice_coefficient,
            "intersectionSize": self.intersection_size,
            "unionSize": self.union_size,
            "set1Size": self.set1_size,
            "set2Size": self.set2_size,
        }


@dataclass(frozen=True)
class CommonShingle(object):
    """
    A shingle found in both documents with its positions in each shingle sequence
    """
    shingle: str
    positions1: tuple[int, ...]
    positions2: tuple[int, ...]

    def to_dict(self) -> dict:
        return {
            "kgram": self.shingle,
            "positions1": list(self.positions1),
            "positions2": list(self.positions2),
        }


@dataclass(frozen=True)
class DocumentReference(object):
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class ComparisonResult(object):
    """
    Outcome of comparing two documents
    """
    doc1: DocumentReference
    doc2: DocumentReference
    similarity: SimilarityResult
    similarity_percentage: float
    classification: SimilarityLevel
    is_plagiarized: bool
    common_shingles: tuple[CommonShingle, ...] = ()

    def to_dict(self) -> dict:
        """
        Plain data representation, ready to be serialized as JSON
        """
        return {
            "doc1": self.doc1.to_dict(),
            "doc2": self.doc2.to_dict(),
            "similarity": self.similarity.to_dict(),
            "similarityPercentage": self.similarity_percentage,
            "classification": {
                "level": self.classification.level,
                "label": self.classification.label,
            },
            "isPlagiarized": self.is_plagiarized,
            "commonKGrams": [c.to_dict() for c in self.common_shingles],
        }


@dataclass(frozen=True)
class AnalysisReport(object):
    """
    Results of an all-pairs analysis together with run metadata
    """
    results: tuple[ComparisonResult, ...]
    total_documents: int
    processing_time: float  # milliseconds
    timestamp: str
    threshold: float = 0.5
    metadata: dict = field(default_factory=dict)

    @property
    def total_comparisons(self) -> int:
        return len(self.results)

    @property
    def plagiarized(self) -> list[ComparisonResult]:
        return [r for r in self.results if r.is_plagiarized]

    def to_dict(self) -> dict:
        return {
            "success": True,
            "results": [r.to_dict() for r in self.results],
            "metadata": {
                "totalDocuments": self.total_documents,
                "totalComparisons": self.total_comparisons,
                "processingTime": self.processing_time,
                "timestamp": self.timestamp,
                "threshold": self.threshold,
                **self.metadata,
            },
        }
