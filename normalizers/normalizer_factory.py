from .plain_normalizer import PlainTextNormalizer
from .stopword_normalizer import StopWordNormalizer


def get_normalizer(remove_stop_words: bool = False):
    if remove_stop_words:
        return StopWordNormalizer()
    else:
        return PlainTextNormalizer()
