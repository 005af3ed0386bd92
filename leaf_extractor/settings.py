import logging
from dataclasses import dataclass


"""
Import this module wherever a setting of the exporter is needed.
All constants that decide how leaves are written to disk live here.
"""

# JPEG quality on the Photoshop scale (0 - 12)
JPEG_QUALITY = 12
# Pillow uses a 0 - 95 scale for the same setting
PILLOW_JPEG_QUALITY = 95

EMBED_COLOR_PROFILE = False
MATTE = "semigray"
SCANS = "standard_baseline"

CAPTION_EXTENSION = "txt"
CAPTION_ENCODING = "utf-8"

PSD_SUFFIXES = (".psd", ".psb")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class RunConfig:
    headless: bool = False
    verbose: bool = False
    extract_captions: bool = False


@dataclass(frozen=True)
class SaveOptions:
    format: str
    extension: str
    quality: int = JPEG_QUALITY
    embed_color_profile: bool = EMBED_COLOR_PROFILE
    matte: str = MATTE
    scans: str = SCANS


def select_save_options(supports_jpeg):
    """
    Picks the image format for a run. Leaves are written as high quality JPEGs
    whenever the host can encode them, otherwise they fall back to PNG.

    :param supports_jpeg: Whether the host has a JPEG encoder available.

    :return: The SaveOptions every leaf of this run is written with.
    """
    if supports_jpeg:
        return SaveOptions(format="jpeg", extension="jpg")
    return SaveOptions(format="png", extension="png")


def configure_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("leaf_extractor").setLevel(level)
