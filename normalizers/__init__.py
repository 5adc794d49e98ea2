from .base import TextNormalizer
from .normalizer_factory import get_normalizer
from .plain_normalizer import PlainTextNormalizer, normalize, tokenize
from .stopword_normalizer import STOP_WORDS, StopWordNormalizer, remove_stop_words

__all__ = [
    "TextNormalizer",
    "PlainTextNormalizer",
    "StopWordNormalizer",
    "STOP_WORDS",
    "get_normalizer",
    "normalize",
    "tokenize",
    "remove_stop_words",
]
