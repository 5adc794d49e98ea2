from .plain_normalizer import PlainTextNormalizer, tokenize

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "is", "was", "are", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "can", "this", "that", "these", "those"
})


def remove_stop_words(text: str) -> str:
    """
    Drop common English function words, keeping the order of the remaining words.

    Args:
        text: Raw or normalized text

    Returns:
        The remaining words joined by single spaces
    """
    return ' '.join(word for word in tokenize(text) if word not in STOP_WORDS)


class StopWordNormalizer(PlainTextNormalizer):
    def normalize(self, text: str) -> str:
        # remove_stop_words tokenizes, so the result is normalized as well
        return remove_stop_words(text)
