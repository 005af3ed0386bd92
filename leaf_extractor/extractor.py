#!/usr/bin/env python3
import argparse
import logging
import os
import sys

import tkinter as tk
from tkinterdnd2 import DND_FILES, TkinterDnD

from leaf_extractor import psd_host
from leaf_extractor.export_runner import ExportRunner, RunState
from leaf_extractor.host_model import PreconditionError
from leaf_extractor.settings import RunConfig, configure_logging, select_save_options

logger = logging.getLogger(__name__)


"""
Leaf extractor
Exports every normal and smart object layer that sits inside a group of a
Photoshop document to its own image, in folders named after the groups. With
no source given the active document of a running Photoshop is used, otherwise
a .psd file, or every .psd file in a folder, is read with psd-tools.
"""


def open_drag_drop_menu():
    """
    Opens a small window that accepts a Photoshop file dropped onto it.

    :return: The path of the dropped file, or an empty string when the window
             was closed without dropping anything.
    """
    root = TkinterDnD.Tk()
    root.title("Leaf extractor")
    file_path_var = tk.StringVar(master=root)

    def handle_drop(event):
        file_path_var.set(event.data)
        # Close dialog box once a file has been dropped
        root.destroy()

    drop_label = tk.Label(root, text="Drag and drop a Photoshop file here")
    drop_label.pack(padx=40, pady=20)
    drop_label.drop_target_register(DND_FILES)
    drop_label.dnd_bind("<<Drop>>", handle_drop)

    root.mainloop()
    # Paths with spaces are wrapped in curly braces by tkdnd
    return file_path_var.get().strip("{}")


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="leaf-extractor",
        description="Export the leaf layers of a Photoshop document to separate images.")
    parser.add_argument("source", nargs="?",
                        help="A .psd/.psb file or a folder of them. "
                             "Leave out to use the active document in Photoshop.")
    parser.add_argument("--psd", action="store_true",
                        help="Read a PSD file with psd-tools, asking for one when no source is given.")
    parser.add_argument("--text", action="store_true", help="Also write text layers to .txt files.")
    parser.add_argument("--headless", action="store_true", help="Do not open any window.")
    parser.add_argument("--debug", action="store_true", help="Log every exported layer.")
    return parser.parse_args(argv)


def make_progress(config):
    if config.headless:
        return None
    from leaf_extractor.progress import TkProgressWindow
    return TkProgressWindow()


def export_psd_file(file_path, config, progress=None):
    """
    Exports the leaves of one PSD file next to it.

    :param file_path: The path to a .psd or .psb file.

    :param config: The RunConfig of this run.

    :param progress: Optional progress reporter.

    :return: The ExportRunner after it ran, or None when the file could not
             be opened.
    """
    try:
        document = psd_host.open_document(file_path)
    except (OSError, ValueError) as e:
        logger.error(f"Could not open {file_path}: {e}")
        return None
    runner = ExportRunner(
        document,
        psd_host.PsdEncoder(document),
        select_save_options(psd_host.supports_jpeg()),
        config=config,
        progress=progress,
    )
    runner.run()
    return runner


def export_psd_source(source, config, progress=None):
    if os.path.isdir(source):
        file_paths = psd_host.find_psd_files(source)
        logger.info(f"Found {len(file_paths)} Photoshop files in {source}")
    else:
        file_paths = [source]
    return [export_psd_file(file_path, config, progress) for file_path in file_paths]


def export_active_photoshop_document(config, progress=None):
    from leaf_extractor import photoshop_host

    with photoshop_host.photoshop_session() as session:
        try:
            document = photoshop_host.open_active_document(session)
        except PreconditionError as e:
            logger.debug(e)
            document = None
        encoder = photoshop_host.PhotoshopEncoder(document) if document is not None else None
        runner = ExportRunner(
            document,
            encoder,
            select_save_options(photoshop_host.supports_jpeg()),
            config=config,
            progress=progress,
        )
        runner.run()
    return runner


def main(argv=None):
    args = parse_arguments(argv)
    config = RunConfig(headless=args.headless, verbose=args.debug, extract_captions=args.text)
    configure_logging(config.verbose)

    source = args.source
    if source is None and args.psd:
        if config.headless:
            logger.error("A source file is needed when running headless with --psd")
            return 2
        source = open_drag_drop_menu()
        if not source:
            logger.error("No file was dropped")
            return 2

    progress = make_progress(config)
    try:
        if source is None:
            runners = [export_active_photoshop_document(config, progress)]
        else:
            runners = export_psd_source(source, config, progress)
    finally:
        if progress is not None:
            progress.close()

    finished = [runner for runner in runners if runner is not None and runner.state is RunState.DONE]
    exported = sum(runner.exported for runner in finished)
    logger.info(f"{exported} leaves exported from {len(finished)}/{len(runners)} documents")
    return 0 if finished else 1


if __name__ == "__main__":
    sys.exit(main())
