import logging
import os

from PIL import Image, features
from psd_tools import PSDImage

from leaf_extractor.host_model import EncodeError, HostAccessError, LayerKind
from leaf_extractor.settings import PILLOW_JPEG_QUALITY, PSD_SUFFIXES

logger = logging.getLogger(__name__)


"""
PSD file host
Reads .psd/.psb files with psd-tools, so leaves can be exported without a
running copy of Photoshop. Visibility is only changed on the document held in
memory, the file on disk is never written.
"""

PSD_KINDS = {
    "pixel": LayerKind.NORMAL,
    "smartobject": LayerKind.SMART_OBJECT,
    "type": LayerKind.TEXT,
}

MATTE_COLORS = {
    "semigray": (128, 128, 128),
    "white": (255, 255, 255),
    "black": (0, 0, 0),
}


class PsdLayer:

    def __init__(self, layer, parent):
        self._layer = layer
        self.parent = parent
        self.name = layer.name
        self.kind = PSD_KINDS.get(layer.kind, LayerKind.OTHER)

    def is_group(self):
        return False

    @property
    def visible(self):
        return self._layer.visible

    @visible.setter
    def visible(self, value):
        self._layer.visible = value

    @property
    def text(self):
        if self.kind is not LayerKind.TEXT:
            return ""
        return self._layer.text

    @property
    def bbox(self):
        return tuple(self._layer.bbox)


class PsdGroup:

    def __init__(self, group, parent):
        self._group = group
        self.parent = parent
        self.name = group.name
        self._children = None

    def is_group(self):
        return True

    @property
    def children(self):
        if self._children is None:
            try:
                self._children = [wrap_layer(child, self) for child in self._group]
            except (KeyError, ValueError, IndexError) as e:
                raise HostAccessError(f"Could not read group {self.name}") from e
        return self._children


def wrap_layer(layer, parent):
    if layer.is_group():
        return PsdGroup(layer, parent)
    return PsdLayer(layer, parent)


class PsdDocument:
    """
    A PSD file opened with psd-tools, shaped like the document of any other
    host.

    :param psd: The opened PSDImage.

    :param file_path: The file the PSDImage was read from, its folder is where
                      the leaves are exported to.
    """

    def __init__(self, psd, file_path):
        self.psd = psd
        self.file_path = os.path.abspath(file_path)
        self.name = os.path.basename(file_path)
        self.path = os.path.dirname(self.file_path).replace("\\", "/")
        self.children = [wrap_layer(layer, self) for layer in psd]

    def groups(self):
        return [child for child in self.children if child.is_group()]

    def has_background_layer(self):
        """
        PSD files carry no explicit background flag that psd-tools exposes,
        so the bottom layer counts as background when it is a plain pixel
        layer covering the whole canvas.
        """
        if not self.children:
            return False
        bottom = self.children[0]
        if bottom.is_group() or bottom.kind is not LayerKind.NORMAL:
            return False
        return bottom.bbox == (0, 0, self.psd.width, self.psd.height)


class PsdEncoder:
    """
    Writes the composite of all visible layers of a PsdDocument to a file.
    """

    def __init__(self, document):
        self.document = document

    def encode(self, path, options):
        try:
            image = self.document.psd.composite(force=True)
        except Exception as e:
            raise EncodeError(f"Could not composite {self.document.name}") from e
        if image is None:
            raise EncodeError(f"{self.document.name} has nothing visible to composite")

        try:
            if options.format == "jpeg":
                image = apply_matte(image, options.matte)
                save_kwargs = {
                    "quality": PILLOW_JPEG_QUALITY,
                    "progressive": options.scans == "progressive",
                }
                icc_profile = image.info.get("icc_profile")
                if options.embed_color_profile and icc_profile:
                    save_kwargs["icc_profile"] = icc_profile
                image.save(path, "JPEG", **save_kwargs)
            else:
                image.save(path, "PNG")
        except (OSError, ValueError) as e:
            raise EncodeError(f"Could not save {path}") from e


def apply_matte(image, matte):
    """
    JPEGs have no transparency, so transparent pixels are filled with the
    matte color before saving.

    :param image: The composite as a PIL image.

    :param matte: One of the MATTE_COLORS names.

    :return: An RGB image.
    """
    if image.mode != "RGBA":
        return image.convert("RGB")
    background = Image.new("RGB", image.size, MATTE_COLORS.get(matte, MATTE_COLORS["semigray"]))
    background.paste(image, mask=image.getchannel("A"))
    background.info.update(image.info)
    return background


def supports_jpeg():
    return features.check("jpg")


def open_document(file_path):
    logger.debug(f"Opening {file_path}")
    return PsdDocument(PSDImage.open(file_path), file_path)


def find_psd_files(directory):
    """
    Lists the Photoshop files in a folder, sorted by name.

    :param directory: The folder to search, subfolders are not searched.

    :return: The full paths of all .psd and .psb files.
    """
    file_names = sorted(os.listdir(directory))
    return [os.path.join(directory, file_name) for file_name in file_names
            if file_name.lower().endswith(PSD_SUFFIXES)]
