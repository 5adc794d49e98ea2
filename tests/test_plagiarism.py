import random
import string

import pytest
from config import DetectorConfig
from model import Document, DocumentFingerprint, SimilarityLevel
from plagiarism import PlagiarismDetector, compare, compare_against_multiple, compare_many, fingerprint
from winnow import fnv1a_hash, polynomial_hash

TEXTS = {
    "a": "The quick brown fox jumps over the lazy dog near the river bank.",
    "b": "The quick brown fox jumps over the lazy dog near the river bank!",
    "c": "A quick brown fox jumped over a lazy dog close to the riverbank.",
    "d": "Completely unrelated prose about databases and query planners.",
    "e": "",
}


def random_text(seed: int, length: int = 300) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice(string.ascii_lowercase) for _ in range(length))


@pytest.fixture
def fingerprints():
    return [fingerprint(key, f"{key}.txt", text) for key, text in TEXTS.items()]


class TestFingerprint:
    """Test class for the fingerprint pipeline."""

    def test_default_pipeline(self):
        fp = fingerprint("doc1", "doc1.txt", "Hello, World!")
        assert fp.document_id == "doc1"
        assert fp.document_name == "doc1.txt"
        assert fp.content == "Hello, World!"
        assert fp.preprocessed_text == "hello world"
        assert fp.shingles == ("hello", "ello ", "llo w", "lo wo", "o wor", " worl", "world")
        assert fp.fingerprints == frozenset(fnv1a_hash(s) for s in fp.shingles)

    def test_deterministic(self):
        """Identical inputs under identical configuration give identical fingerprints."""
        config = DetectorConfig(use_winnowing=True)
        fp1 = fingerprint("x", "x", TEXTS["c"], config)
        fp2 = fingerprint("x", "x", TEXTS["c"], config)
        assert fp1 == fp2

    def test_word_mode(self):
        config = DetectorConfig(shingle_mode="word", word_ngram_size=2)
        fp = fingerprint("doc", "doc", "The cat sat.", config)
        assert fp.shingles == ("the cat", "cat sat")

    def test_stop_words_removed(self):
        config = DetectorConfig(remove_stop_words=True, shingle_mode="word", word_ngram_size=2)
        fp = fingerprint("doc", "doc", "The cat is on the mat", config)
        assert fp.preprocessed_text == "cat mat"
        assert fp.shingles == ("cat mat",)

    def test_winnowing_reduces_fingerprints(self):
        text = random_text(3)
        full = fingerprint("doc", "doc", text)
        winnowed = fingerprint("doc", "doc", text, DetectorConfig(use_winnowing=True, winnowing_window_size=4))
        assert winnowed.fingerprints < full.fingerprints
        assert winnowed.shingles == full.shingles

    def test_polynomial_hash(self):
        fp = fingerprint("doc", "doc", "abcde", DetectorConfig(hash_function="polynomial"))
        assert fp.fingerprints == frozenset({polynomial_hash("abcde")})

    def test_short_text_gives_empty_set(self):
        fp = fingerprint("doc", "doc", "abc", DetectorConfig(k_gram_size=5))
        assert fp.shingles == ()
        assert fp.fingerprints == frozenset()


class TestCompare:
    """Test class for pairwise comparison."""

    def test_identical_documents(self):
        fp1 = fingerprint("1", "one", "the cat sat on the mat", DetectorConfig(k_gram_size=5))
        fp2 = fingerprint("2", "two", "the cat sat on the mat", DetectorConfig(k_gram_size=5))
        result = compare(fp1, fp2, threshold=0.5)
        assert result.similarity.jaccard_similarity == 1.0
        assert result.similarity_percentage == 100.0
        assert result.classification is SimilarityLevel.VERY_HIGH
        assert result.classification.level == "very-high"
        assert result.is_plagiarized is True

    def test_disjoint_documents(self):
        config = DetectorConfig(k_gram_size=3)
        fp1 = fingerprint("1", "one", "abcdefgh", config)
        fp2 = fingerprint("2", "two", "zzzzzzzz", config)
        assert not fp1.fingerprints & fp2.fingerprints
        result = compare(fp1, fp2, threshold=0.5)
        assert result.similarity.jaccard_similarity == 0.0
        assert result.classification is SimilarityLevel.NONE
        assert result.is_plagiarized is False
        assert result.common_shingles == ()

    def test_empty_documents(self):
        """Two empty documents are identical under Jaccard but do not overlap."""
        fp1 = fingerprint("1", "one", "")
        fp2 = fingerprint("2", "two", "")
        result = compare(fp1, fp2, threshold=0.5)
        assert result.similarity.jaccard_similarity == 1.0
        assert result.similarity.overlap_coefficient == 0
        assert result.similarity.cosine_similarity == 0
        assert result.similarity.dice_coefficient == 1.0
        assert result.is_plagiarized is True

    def test_document_references(self, fingerprints):
        result = compare(fingerprints[0], fingerprints[3])
        assert (result.doc1.id, result.doc1.name) == ("a", "a.txt")
        assert (result.doc2.id, result.doc2.name) == ("d", "d.txt")

    def test_threshold_is_inclusive(self, fingerprints):
        result = compare(fingerprints[0], fingerprints[2])
        jaccard = result.similarity.jaccard_similarity
        assert compare(fingerprints[0], fingerprints[2], threshold=jaccard).is_plagiarized
        assert not compare(fingerprints[0], fingerprints[2], threshold=min(1.0, jaccard + 1e-9)).is_plagiarized

    def test_common_shingles_are_capped(self):
        text = random_text(1)
        fp1 = fingerprint("1", "one", text)
        fp2 = fingerprint("2", "two", text)
        assert len(set(fp1.shingles)) > 100
        assert len(compare(fp1, fp2).common_shingles) == 100
        assert len(compare(fp1, fp2, max_common_shingles=10).common_shingles) == 10

    def test_common_shingle_positions(self):
        fp1 = fingerprint("1", "one", "abcdef", DetectorConfig(k_gram_size=3))
        fp2 = fingerprint("2", "two", "xxcdef", DetectorConfig(k_gram_size=3))
        result = compare(fp1, fp2)
        assert [(c.shingle, c.positions1, c.positions2) for c in result.common_shingles] == [
            ("cde", (2,), (2,)),
            ("def", (3,), (3,)),
        ]

    def test_to_dict(self, fingerprints):
        data = compare(fingerprints[0], fingerprints[1]).to_dict()
        assert data["doc1"] == {"id": "a", "name": "a.txt"}
        assert data["classification"]["level"] == "very-high"
        assert data["classification"]["label"] == "Very High Similarity"
        assert data["isPlagiarized"] is True
        assert data["similarityPercentage"] == pytest.approx(data["similarity"]["jaccardSimilarity"] * 100)
        assert all(set(c) == {"kgram", "positions1", "positions2"} for c in data["commonKGrams"])


class TestCompareAgainstMultiple:

    def test_excludes_target_and_sorts(self, fingerprints):
        target = fingerprints[0]
        results = compare_against_multiple(target, fingerprints)
        assert len(results) == len(fingerprints) - 1
        assert all(r.doc2.id != target.document_id for r in results)
        percentages = [r.similarity_percentage for r in results]
        assert percentages == sorted(percentages, reverse=True)
        assert results[0].doc2.id == "b"


class TestCompareMany:

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 5])
    def test_number_of_pairs(self, fingerprints, count):
        results = compare_many(fingerprints[:count])
        assert len(results) == count * (count - 1) // 2

    def test_verdict_and_order(self, fingerprints):
        threshold = 0.3
        results = compare_many(fingerprints, threshold)
        for r in results:
            assert r.is_plagiarized == (r.similarity.jaccard_similarity >= threshold)
        percentages = [r.similarity_percentage for r in results]
        assert percentages == sorted(percentages, reverse=True)

    def test_pairs_are_ordered_by_input(self, fingerprints):
        order = {fp.document_id: index for index, fp in enumerate(fingerprints)}
        for r in compare_many(fingerprints):
            assert order[r.doc1.id] < order[r.doc2.id]

    def test_threads_give_same_results(self, fingerprints):
        sequential = compare_many(fingerprints, 0.5, workers=1)
        parallel = compare_many(fingerprints, 0.5, workers=4)

        def key(r):
            return r.doc1.id, r.doc2.id

        assert sorted(sequential, key=key) == sorted(parallel, key=key)
        assert [r.similarity_percentage for r in parallel] == [r.similarity_percentage for r in sequential]

    def test_threaded_failure_propagates(self, fingerprints):
        broken = DocumentFingerprint("x", "x", "", "", (), None)
        with pytest.raises(TypeError):
            compare_many(fingerprints + [broken], workers=2)


class TestPlagiarismDetector:

    def test_defaults(self):
        detector = PlagiarismDetector()
        assert detector.settings == DetectorConfig()
        assert detector.settings.k_gram_size == 5
        assert detector.settings.threshold == 0.5
        assert detector.settings.use_winnowing is False
        assert detector.settings.winnowing_window_size == 4
        assert detector.settings.word_ngram_size == 3
        assert detector.settings.remove_stop_words is False

    def test_configuration_is_applied(self):
        detector = PlagiarismDetector({'plagiarism_detection': {'k_gram_size': 3, 'threshold': 0.9}})
        fp = detector.create_document_fingerprint("1", "one", "abcd")
        assert fp.shingles == ("abc", "bcd")
        result = detector.compare_documents(fp, detector.create_document_fingerprint("2", "two", "abcx"))
        assert result.is_plagiarized is False

    def test_explicit_threshold_overrides_configuration(self):
        detector = PlagiarismDetector()
        fp1 = detector.create_document_fingerprint("1", "one", TEXTS["a"])
        fp2 = detector.create_document_fingerprint("2", "two", TEXTS["c"])
        assert detector.compare_documents(fp1, fp2, threshold=0.0).is_plagiarized is True
        assert detector.compare_documents(fp1, fp2, threshold=1.0).is_plagiarized is False

    def test_update_config(self):
        detector = PlagiarismDetector()
        detector.update_config(k_gram_size=3, use_winnowing=True)
        assert detector.settings.k_gram_size == 3
        assert detector.settings.use_winnowing is True

    def test_invalid_update_keeps_configuration(self):
        detector = PlagiarismDetector()
        with pytest.raises(ValueError):
            detector.update_config(k_gram_size=0)
        assert detector.settings.k_gram_size == 5

    def test_compare_all(self):
        detector = PlagiarismDetector({'plagiarism_detection': {'workers': 2}})
        fps = [detector.create_document_fingerprint(k, k, t) for k, t in TEXTS.items()]
        assert len(detector.compare_all(fps)) == 10

    def test_compare_against_multiple(self):
        detector = PlagiarismDetector()
        fps = [detector.create_document_fingerprint(k, k, t) for k, t in TEXTS.items()]
        assert len(detector.compare_against_multiple(fps[1], fps)) == 4

    def test_estimate_similarity(self):
        detector = PlagiarismDetector()
        fp1 = detector.create_document_fingerprint("1", "one", TEXTS["a"])
        fp2 = detector.create_document_fingerprint("2", "two", TEXTS["a"])
        assert detector.estimate_similarity(fp1, fp2, num_hashes=32) == 1.0

    def test_analyze(self):
        detector = PlagiarismDetector()
        documents = [Document.from_text(f"{k}.txt", t) for k, t in TEXTS.items()]
        report = detector.analyze(documents)
        assert report.total_documents == 5
        assert report.total_comparisons == 10
        assert report.threshold == 0.5
        assert report.processing_time >= 0
        data = report.to_dict()
        assert data["success"] is True
        assert data["metadata"]["totalComparisons"] == 10
        assert data["metadata"]["config"]["k_gram_size"] == 5

    def test_analyze_requires_two_documents(self):
        detector = PlagiarismDetector()
        with pytest.raises(ValueError) as exc_info:
            detector.analyze([Document.from_text("only.txt", "text")])
        assert "At least 2 documents" in str(exc_info.value)
