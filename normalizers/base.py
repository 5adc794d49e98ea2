from abc import ABC, abstractmethod

class TextNormalizer(ABC):
    """
    Abstract base class for all text normalizers.
    Each subclass must implement the `normalize` method
    that takes raw text and returns its canonical form.
    """
    def __init__(self):
        super().__init__()

    @abstractmethod
    def normalize(self, text: str) -> str:
        """
        Normalize text by removing irrelevant differences
        such as letter case, punctuation or whitespace.
        """
        raise NotImplementedError("Subclasses must implement this method")
