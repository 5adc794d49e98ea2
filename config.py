import dataclasses
import logging
import os
from typing import Mapping

import utils
from source import Source
from winnow import HASH_FUNCTIONS

SHINGLE_MODE_CHARACTER = 'character'
SHINGLE_MODE_WORD = 'word'
SHINGLE_MODES = (SHINGLE_MODE_CHARACTER, SHINGLE_MODE_WORD)

DEFAULT_CONFIGURATION = {
    'general': {
        'documents': [],  # Document sources: file or directory paths, local://<path> or file://<listing.csv>
        'extensions': ['.txt', '.md'],  # File extensions read when a source is a directory
        'output': 'plagiarism_results',  # Base name of the report file, a timestamp and extension are appended
        'format': 'json',  # Report format: json, markdown or html
        'export': True  # Write a report file after the analysis
    },

    'logging': {
        'level': 'INFO'
    },

    'plagiarism_detection': {
        'files': [],  # List of globs a document source must match to be included
        'exclude_files': [".DS_Store", ".*"],  # List of globs for documents to ignore
        'k_gram_size': 5,  # Length of character k-grams
        'shingle_mode': SHINGLE_MODE_CHARACTER,  # 'character' k-grams or 'word' n-grams
        'word_ngram_size': 3,  # Words per shingle in word mode
        'use_winnowing': False,  # Reduce fingerprints by winnowing
        'winnowing_window_size': 4,  # Number of consecutive hashes per winnowing window
        'remove_stop_words': False,  # Drop common English function words before shingling
        'threshold': 0.5,  # Minimum Jaccard similarity to flag a pair as plagiarized
        'hash_function': 'fnv1a',  # 'fnv1a' or 'polynomial'
        'max_common_shingles': 100,  # Maximum number of common shingles attached to a result
        'workers': 1  # Threads used for the all-pairs comparison
    }
}


@dataclasses.dataclass(frozen=True)
class DetectorConfig(object):
    """
    Validated, immutable settings of the detection pipeline
    """
    k_gram_size: int = 5
    shingle_mode: str = SHINGLE_MODE_CHARACTER
    word_ngram_size: int = 3
    use_winnowing: bool = False
    winnowing_window_size: int = 4
    remove_stop_words: bool = False
    threshold: float = 0.5
    hash_function: str = 'fnv1a'
    max_common_shingles: int = 100
    workers: int = 1

    def __post_init__(self):
        for name in ('k_gram_size', 'word_ngram_size', 'winnowing_window_size', 'workers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.max_common_shingles, bool) or not isinstance(self.max_common_shingles, int) \
                or self.max_common_shingles < 0:
            raise ValueError(f"max_common_shingles must be a non-negative integer, got {self.max_common_shingles!r}")
        if self.shingle_mode not in SHINGLE_MODES:
            raise ValueError(f"Unsupported shingle mode: {self.shingle_mode}")
        if self.hash_function not in HASH_FUNCTIONS:
            raise ValueError(f"Unsupported hash function: {self.hash_function}")
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)) \
                or not 0 <= self.threshold <= 1:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold!r}")

    @property
    def use_word_ngrams(self) -> bool:
        return self.shingle_mode == SHINGLE_MODE_WORD

    @classmethod
    def from_mapping(cls, options: Mapping) -> "DetectorConfig":
        """
        Build a configuration from a mapping, unknown keys (like file filters) are ignored
        :param options: The plagiarism_detection section of the application configuration
        :return: The validated configuration
        """
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in options.items() if key in names})

    def replace(self, **changes) -> "DetectorConfig":
        """
        Return a copy with the given options changed, validated like a new configuration
        """
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


class ConfigurationBasedObject(object):
    def __init__(self, config = None, environment = 'prod'):
        """
        Create a new configuration based object and supply the application configuration
        :param config: The configuration passed by the user (may contain a list in decreasing order of priority)
        :param environment: Runtime environment to use as optional suffix to configuration parameters
        """
        # Set default config as config parameters
        self.config = {}
        for key in DEFAULT_CONFIGURATION.keys():
            self.config[key] = DEFAULT_CONFIGURATION[key].copy()

        config = utils.ensure_list(config)
        for c in config[::-1]:
            for key in self.config:
                if isinstance(self.config[key], Mapping):
                    for option in self.config[key]:
                        value = c.get(key, {}).get(option, None)
                        environment_value = c.get(key, {}).get(f'{option}_{environment}', None)
                        if environment_value is not None:
                            self.config[key][option] = environment_value
                        elif value is not None:
                            self.config[key][option] = value
                else:
                    value = c.get(key, None)
                    environment_value = c.get(f'{key}_{environment}', None)
                    if environment_value is not None:
                        self.config[key] = environment_value
                    elif value is not None:
                        self.config[key] = value

        # Setup logging
        logging.basicConfig(level=self.config['logging']['level'])
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(self.config['logging']['level'])

        self.detector_config = DetectorConfig.from_mapping(self.config['plagiarism_detection'])

    @property
    def output_base(self):
        return os.path.abspath(self.config['general']['output'])

    def fetch_targets(self) -> list[str]:
        """
        Fetches the list of document paths to process during execution
        :return: List of document paths
        """
        source_urls = utils.ensure_list(self.config['general']['documents'])
        if len(source_urls) == 0:
            raise ValueError("No document sources configured in general->documents")

        extensions = utils.ensure_list(self.config['general']['extensions'])
        paths = []
        for source_url in source_urls:
            self.logger.debug(f"Processing source: {source_url}")
            source = Source(source_url, extensions)
            paths += source.paths

        self.logger.debug(f"Found {len(paths)} documents: {paths}")
        return paths
