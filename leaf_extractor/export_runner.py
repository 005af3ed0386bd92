import logging
from enum import Enum

from leaf_extractor import leaf_records
from leaf_extractor import visibility_ledger
from leaf_extractor.filesystem import LocalFilesystem
from leaf_extractor.host_model import EncodeError
from leaf_extractor.settings import RunConfig
from leaf_extractor.tree_collector import collect

logger = logging.getLogger(__name__)


"""
Leaf export
Runs one export of a document: collect the leaves, write down and switch off
their visibility, show and save each leaf on its own, and finally put every
layer back the way it was found. Once layers have been hidden, the restore
step always runs, also when single leaves fail along the way.
"""


class RunState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    HIDDEN = "hidden"
    EXPORTING = "exporting"
    RESTORING = "restoring"
    DONE = "done"
    ABORTED = "aborted"


class ExportRunner:
    """
    Exports the leaves of a single document.

    :param document: The host document, or None when the host has no open
                     document.

    :param encoder: Writes the visible composite of the document to a file,
                    through encode(path, options).

    :param save_options: The SaveOptions selected for this run; its extension
                         is used for every leaf path.

    :param config: A RunConfig, only extract_captions is read here.

    :param filesystem: Creates folders and writes captions, defaults to the
                       local filesystem.

    :param progress: Optional reporter with set_status, alert and close.
                     The export behaves the same without one.
    """

    def __init__(self, document, encoder, save_options, config=None, filesystem=None, progress=None):
        self.document = document
        self.encoder = encoder
        self.save_options = save_options
        self.config = config or RunConfig()
        self.filesystem = filesystem or LocalFilesystem()
        self.progress = progress
        self.state = RunState.IDLE
        self.history = [RunState.IDLE]
        self.collection = None
        self.ledger = None
        self.exported = 0

    def run(self):
        """
        :return: The amount of leaves that were saved without an error.
        """
        problem = self._check_document()
        if problem:
            self._abort(problem)
            return 0

        self._enter(RunState.COLLECTING)
        self._status(f"Collecting layers of {self.document.name}")
        try:
            self.collection = collect(self.document, self.save_options.extension)
        except Exception:
            self._abort(f"Could not collect the layers of {self.document.name}")
            raise

        leaves, captions = self.collection.leaves, self.collection.captions
        if leaves:
            self.ledger = visibility_ledger.capture(leaves, captions)
            try:
                visibility_ledger.hide_all(leaves, captions)
                self._enter(RunState.HIDDEN)
                for index, leaf in enumerate(leaves):
                    self._enter(RunState.EXPORTING)
                    self._status(f"Exporting {index + 1}/{len(leaves)}: {leaf.name}")
                    self._export_leaf(leaf)
            finally:
                self._enter(RunState.RESTORING)
                visibility_ledger.restore(self.ledger, leaves, captions)
        else:
            logger.info(f"{self.document.name} has no layers to export")
            self._enter(RunState.RESTORING)

        if self.config.extract_captions:
            self._write_captions(captions)

        self._enter(RunState.DONE)
        logger.info(f"Exported {self.exported}/{len(leaves)} leaves of {self.document.name}")
        self._status(f"Exported {self.exported}/{len(leaves)} leaves")
        return self.exported

    def _check_document(self):
        if self.document is None:
            return "There is no active document."
        if not self.document.children:
            return f"{self.document.name} has no layers."
        if not self.document.has_background_layer():
            return f"The bottom layer of {self.document.name} is not a background layer."
        return None

    def _export_leaf(self, leaf):
        logger.debug(f"Extract : {leaf.name} : {leaf.output_path}")
        directory = leaf_records.output_directory(leaf)
        if not self._ensure_directory(directory):
            logger.warning(f"Skipped {leaf.name}, its folder could not be created")
            return

        leaf_records.show(leaf)
        try:
            self.encoder.encode(leaf.output_path, self.save_options)
        except EncodeError as e:
            logger.error(f"Failed to export {leaf.name} to {leaf.output_path}: {e}")
            return
        finally:
            leaf_records.hide(leaf)
        self.exported += 1

    def _ensure_directory(self, directory):
        if self.filesystem.directory_exists(directory):
            return True
        try:
            self.filesystem.create_directory(directory)
        except OSError as e:
            logger.error(f"Failed to create folder {directory}: {e}")
            return False
        logger.debug(f"{directory} has been created")
        return True

    def _write_captions(self, captions):
        written = 0
        for caption in captions:
            if not caption.text:
                continue
            if not self._ensure_directory(leaf_records.output_directory(caption)):
                continue
            try:
                self.filesystem.write_text_file(caption.output_path, caption.text)
            except OSError as e:
                logger.error(f"Failed to write caption {caption.name} to {caption.output_path}: {e}")
                continue
            written += 1
        logger.info(f"Wrote {written} captions")
        return written

    def _abort(self, message):
        logger.error(message)
        if self.progress is not None:
            self.progress.alert(message)
        self._enter(RunState.ABORTED)

    def _enter(self, state):
        self.state = state
        if self.history[-1] is not state:
            self.history.append(state)

    def _status(self, text):
        if self.progress is not None:
            self.progress.set_status(text)