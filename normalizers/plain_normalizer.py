import re
from .base import TextNormalizer

_PUNCTUATION = re.compile(r'[^\w\s]')
_WHITESPACE = re.compile(r'\s+')


def normalize(text: str) -> str:
    """
    Lowercase the text, turn punctuation into spaces and collapse whitespace.
    Empty input gives an empty string.
    """
    text = text.lower()
    text = _PUNCTUATION.sub(' ', text)
    text = _WHITESPACE.sub(' ', text)
    return text.strip()


def tokenize(text: str) -> list[str]:
    """
    Split normalized text into words.
    """
    return [word for word in normalize(text).split(' ') if word]


class PlainTextNormalizer(TextNormalizer):
    def normalize(self, text: str) -> str:
        return normalize(text)

    def tokenize(self, text: str) -> list[str]:
        return tokenize(text)
