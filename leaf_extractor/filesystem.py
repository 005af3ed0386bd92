import os

from leaf_extractor.settings import CAPTION_ENCODING


class LocalFilesystem:
    """
    The few filesystem operations the exporter needs. Failures surface as
    OSError, the exporter decides whether a failure skips a leaf or not.
    """

    def directory_exists(self, path):
        return os.path.isdir(path)

    def create_directory(self, path):
        os.makedirs(path, exist_ok=True)

    def write_text_file(self, path, content):
        with open(path, "w", encoding=CAPTION_ENCODING) as text_file:
            text_file.write(content)
