import csv
import os
from io import StringIO

import model


class Source(object):
    """
    Declares a new source for documents
    """

    TYPE_LOCAL_CSV = "local_csv"
    TYPE_DIRECTORY = "directory"
    TYPE_SINGLE_DOCUMENT = "document"

    def __init__(self, url: str, extensions=('.txt', '.md')):
        """
        Init a new source with the given url
        Based on the url the source will determine how to find documents
        :param url: Path of a text file or directory, local://<path> or file://<listing.csv>
        :param extensions: File extensions of plain text documents
        """
        self.extensions = tuple(e.lower() for e in extensions)

        if url.startswith("http://") or url.startswith("https://"):
            raise ValueError(f"Remote sources are not supported: {url}")

        elif url.startswith('file://'):
            self.type = Source.TYPE_LOCAL_CSV

            path = url[len('file://'):]
            if os.path.isfile(path):
                with open(path, 'r', encoding='utf-8') as f:
                    data = f.read()
                self.paths = self._read_paths_from_csv(data, os.path.dirname(os.path.abspath(path)))
            else:
                raise FileNotFoundError(f"Failed to read document listing from file at {path}")

        else:
            if url.startswith('local://'):
                url = url[len('local://'):]

            if os.path.isdir(url):
                self.type = Source.TYPE_DIRECTORY
                self.paths = self._find_documents(url)
            elif os.path.isfile(url):
                self.type = Source.TYPE_SINGLE_DOCUMENT
                self.check_extension(url)
                self.paths = [url]
            else:
                raise FileNotFoundError(f"No such document or directory: {url}")

    def check_extension(self, path: str):
        extension = os.path.splitext(path)[1].lower()
        if extension not in self.extensions:
            raise ValueError(f"Unsupported file type: {extension or path}")

    def _find_documents(self, directory: str) -> list[str]:
        """
        Collect all text documents below a directory
        :param directory: Directory to search
        :return: Sorted list of document paths
        """
        result = []
        for root, dirs, files in os.walk(directory):
            for f in files:
                if os.path.splitext(f)[1].lower() in self.extensions:
                    result.append(os.path.join(root, f))
        return sorted(result)

    def _read_paths_from_csv(self, content: str, base_directory: str) -> list[str]:
        """
        Read document paths from a CSV file content, relative paths are resolved against the listing
        :param content: The File content to process
        :param base_directory: Directory containing the listing
        :return: Document paths
        """
        # CSV can read only file like objects
        f = StringIO(content)
        reader = csv.reader(f, delimiter=';', quotechar='"', lineterminator='\n')

        result = []
        for row in reader:
            if not row or not row[0].strip():
                continue
            path = os.path.join(base_directory, row[0].strip())
            self.check_extension(path)
            result.append(path)

        return result

    @staticmethod
    def read_document(path: str) -> model.Document:
        """
        Read a plain text document from disk
        :param path: Path of the document
        :return: The document, its identifier derived from the path
        """
        with open(path, 'r', encoding='utf-8') as f:
            return model.Document.from_path(path, f.read())
