import datetime
import fnmatch
import os
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Sequence

import config as config_module
import minhash
import report
from config import DetectorConfig
from model import AnalysisReport, ComparisonResult, Document, DocumentFingerprint, DocumentReference
from normalizers.normalizer_factory import get_normalizer
from similarity import classify_similarity, compute_all_similarities, find_common_shingles
from source import Source
from winnow import (generate_fingerprints, generate_winnowing_fingerprints, get_hash_function, get_kgrams,
                    get_word_ngrams)


def fingerprint(document_id: str, document_name: str, content: str,
                config: DetectorConfig = DetectorConfig()) -> DocumentFingerprint:
    """
    Run the full fingerprinting pipeline for one document.

    Text → normalization (optionally without stop words) → shingles → hashes →
    fingerprint set (all hashes or the winnowed subset).

    Args:
        document_id (str): Unique identifier of the document.
        document_name (str): Display name of the document.
        content (str): Raw text.
        config (DetectorConfig): Pipeline settings.

    Returns:
        DocumentFingerprint: The immutable fingerprint of the document.
    """
    # Step 1: Normalize
    normalizer = get_normalizer(config.remove_stop_words)
    preprocessed_text = normalizer.normalize(content)

    # Step 2: Generate shingles
    if config.use_word_ngrams:
        shingles = get_word_ngrams(preprocessed_text, config.word_ngram_size)
    else:
        shingles = get_kgrams(preprocessed_text, config.k_gram_size)

    # Step 3: Hash, optionally winnowing the hash sequence
    hash_function = get_hash_function(config.hash_function)
    if config.use_winnowing:
        fingerprints = generate_winnowing_fingerprints(shingles, config.winnowing_window_size, hash_function)
    else:
        fingerprints = generate_fingerprints(shingles, hash_function)

    return DocumentFingerprint(
        document_id=document_id,
        document_name=document_name,
        content=content,
        preprocessed_text=preprocessed_text,
        shingles=tuple(shingles),
        fingerprints=frozenset(fingerprints),
    )


def compare(doc1: DocumentFingerprint, doc2: DocumentFingerprint, threshold: float = 0.5,
            max_common_shingles: int = 100) -> ComparisonResult:
    """
    Compare two documents by the Jaccard similarity of their fingerprint sets.

    Args:
        doc1 (DocumentFingerprint): First document.
        doc2 (DocumentFingerprint): Second document.
        threshold (float): Minimum Jaccard similarity for the plagiarism verdict.
        max_common_shingles (int): Number of common shingles kept for highlighting.

    Returns:
        ComparisonResult: Metrics, classification and verdict for the pair.
    """
    similarity = compute_all_similarities(doc1.fingerprints, doc2.fingerprints)
    common_shingles = find_common_shingles(doc1.shingles, doc2.shingles)

    return ComparisonResult(
        doc1=DocumentReference(doc1.document_id, doc1.document_name),
        doc2=DocumentReference(doc2.document_id, doc2.document_name),
        similarity=similarity,
        similarity_percentage=similarity.jaccard_similarity * 100,
        classification=classify_similarity(similarity.jaccard_similarity),
        is_plagiarized=similarity.jaccard_similarity >= threshold,
        common_shingles=tuple(common_shingles[:max_common_shingles]),
    )


def _rank(results: Iterable[ComparisonResult]) -> list[ComparisonResult]:
    return sorted(results, key=lambda r: r.similarity_percentage, reverse=True)


def compare_against_multiple(target: DocumentFingerprint, documents: Iterable[DocumentFingerprint],
                             threshold: float = 0.5, max_common_shingles: int = 100) -> list[ComparisonResult]:
    """
    Compare one document against every other document, most similar first.
    Documents sharing the target's identifier are skipped.
    """
    return _rank(compare(target, doc, threshold, max_common_shingles)
                 for doc in documents if doc.document_id != target.document_id)


def compare_many(documents: Sequence[DocumentFingerprint], threshold: float = 0.5,
                 max_common_shingles: int = 100, workers: int = 1) -> list[ComparisonResult]:
    """
    Compare all unique pairs of documents, most similar first.

    Args:
        documents: Fingerprints to compare, n documents give n*(n-1)/2 results.
        threshold: Minimum Jaccard similarity for the plagiarism verdict.
        max_common_shingles: Number of common shingles kept per result.
        workers: Number of threads, pairs are compared sequentially if 1.

    Returns:
        The comparison results sorted by descending similarity.
    """
    pairs = [(documents[i], documents[j])
             for i in range(len(documents))
             for j in range(i + 1, len(documents))]

    if workers <= 1 or len(pairs) < 2:
        return _rank(compare(a, b, threshold, max_common_shingles) for a, b in pairs)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(compare, a, b, threshold, max_common_shingles) for a, b in pairs]
        # result() re-raises the first failing comparison
        results = [future.result() for future in futures]

    return _rank(results)


class PlagiarismDetector(config_module.ConfigurationBasedObject):
    """
    Detects plagiarism between documents using fingerprinting and similarity metrics.
    """

    def __init__(self, config=None, environment='prod'):
        super().__init__(config, environment)
        self.report = None

    @property
    def settings(self) -> DetectorConfig:
        return self.detector_config

    def update_config(self, **changes) -> DetectorConfig:
        """
        Change pipeline settings for subsequent runs
        :return: The new settings
        """
        self.detector_config = self.detector_config.replace(**changes)
        self.logger.debug(f"Updated detector configuration: {self.detector_config}")
        return self.detector_config

    def create_document_fingerprint(self, document_id: str, document_name: str, content: str) -> DocumentFingerprint:
        return fingerprint(document_id, document_name, content, self.detector_config)

    def compare_documents(self, doc1: DocumentFingerprint, doc2: DocumentFingerprint,
                          threshold: float = None) -> ComparisonResult:
        threshold = self.detector_config.threshold if threshold is None else threshold
        return compare(doc1, doc2, threshold, self.detector_config.max_common_shingles)

    def compare_against_multiple(self, target: DocumentFingerprint, documents: Iterable[DocumentFingerprint],
                                 threshold: float = None) -> list[ComparisonResult]:
        threshold = self.detector_config.threshold if threshold is None else threshold
        return compare_against_multiple(target, documents, threshold, self.detector_config.max_common_shingles)

    def compare_all(self, documents: Sequence[DocumentFingerprint], threshold: float = None) -> list[ComparisonResult]:
        threshold = self.detector_config.threshold if threshold is None else threshold
        return compare_many(documents, threshold, self.detector_config.max_common_shingles,
                            self.detector_config.workers)

    def estimate_similarity(self, doc1: DocumentFingerprint, doc2: DocumentFingerprint,
                            num_hashes: int = 100) -> float:
        """
        Approximate the Jaccard similarity of the shingle sets of two documents with MinHash signatures
        """
        signature1 = minhash.generate_minhash_signature(doc1.shingles, num_hashes)
        signature2 = minhash.generate_minhash_signature(doc2.shingles, num_hashes)
        return minhash.estimate_similarity(signature1, signature2)

    def analyze(self, documents: Sequence[Document]) -> AnalysisReport:
        """
        Fingerprint the documents and compare all pairs
        :param documents: Documents to analyze, at least two
        :return: Report with all comparison results, most similar first
        """
        if len(documents) < 2:
            raise ValueError("At least 2 documents are required")

        start = time.perf_counter()
        fingerprints = []
        for document in documents:
            self.logger.debug(f"Fingerprinting {document.name} ({document.id})")
            fingerprints.append(self.create_document_fingerprint(document.id, document.name, document.content))

        results = self.compare_all(fingerprints)
        processing_time = (time.perf_counter() - start) * 1000

        self.logger.info(f"Compared {len(documents)} documents in {len(results)} comparisons, "
                         f"{sum(1 for r in results if r.is_plagiarized)} above threshold "
                         f"{self.detector_config.threshold}")

        return AnalysisReport(
            results=tuple(results),
            total_documents=len(documents),
            processing_time=round(processing_time, 3),
            timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            threshold=self.detector_config.threshold,
            metadata={"config": self.detector_config.to_dict()},
        )

    def run(self):
        """
        Read all configured documents, compare them and export the report
        :return: The analysis report
        """
        included_files = [(p, re.compile(fnmatch.translate(p)))
                          for p in self.config['plagiarism_detection'].get('files', [])]
        excluded_files = [(p, re.compile(fnmatch.translate(p)))
                          for p in self.config['plagiarism_detection'].get('exclude_files', [])]

        # Filter relevant files, patterns with a slash match the full path, others the file name
        def matches(pattern, path):
            glob, regex = pattern
            if '/' in glob:
                return regex.match(path.replace(os.sep, '/'))
            return regex.match(os.path.basename(path))

        paths = self.fetch_targets()
        if included_files:
            paths = list(filter(lambda f: any(matches(r, f) for r in included_files), paths))
        if excluded_files:
            paths = list(filter(lambda f: all(not matches(r, f) for r in excluded_files), paths))
        self.logger.debug(f"Processing {len(paths)} documents after filtering")

        documents = self.read_documents(paths)
        self.report = self.analyze(documents)

        if self.config['general'].get('export', True):
            self.export_results()
        return self.report

    def read_documents(self, paths: Iterable[str]) -> list[Document]:
        documents = []
        for path in paths:
            try:
                documents.append(Source.read_document(path))
            except (OSError, UnicodeDecodeError) as e:
                self.logger.warning(f"Error reading {path}: {e}")
        return documents

    def export_results(self, output_format: str = None) -> str:
        """
        Export plagiarism detection results to a timestamped report file.
        :return: Path of the written report, None if writing failed
        """
        output_format = output_format or self.config['general'].get('format', 'json')
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output_file = f"{self.output_base}_{timestamp}.{report.extension(output_format)}"

        try:
            report.write_report(self.report, output_file, output_format)
            self.logger.info(f"Plagiarism report written to {output_file}")
            return output_file
        except OSError as e:
            self.logger.error(f"Failed to export plagiarism results: {e}")
            return None
