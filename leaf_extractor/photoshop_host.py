import logging

import photoshop.api as ps
from comtypes import COMError
from photoshop import Session
from photoshop.api.errors import PhotoshopPythonAPIError

from leaf_extractor.host_model import EncodeError, HostAccessError, LayerKind, PreconditionError

logger = logging.getLogger(__name__)


"""
Photoshop host
Exports leaves of the document that is open in a running Photoshop, through
the COM interface of photoshop-python-api. Only works on Windows.
"""

HOST_ERRORS = (COMError, PhotoshopPythonAPIError)

PHOTOSHOP_KINDS = {
    ps.LayerKind.NormalLayer: LayerKind.NORMAL,
    ps.LayerKind.SmartObjectLayer: LayerKind.SMART_OBJECT,
    ps.LayerKind.TextLayer: LayerKind.TEXT,
}

MATTE_TYPES = {
    "semigray": ps.MatteType.SemiGray,
    "white": ps.MatteType.WhiteMatte,
    "black": ps.MatteType.BlackMatte,
}

SCAN_TYPES = {
    "standard_baseline": ps.FormatOptionsType.StandardBaseline,
    "optimized_baseline": ps.FormatOptionsType.OptimizedBaseline,
    "progressive": ps.FormatOptionsType.Progressive,
}


def _layer_kind(com_layer):
    try:
        return PHOTOSHOP_KINDS.get(ps.LayerKind(com_layer.kind), LayerKind.OTHER)
    except ValueError:
        return LayerKind.OTHER


class PhotoshopLayer:

    def __init__(self, com_layer, parent):
        self._layer = com_layer
        self.parent = parent
        self.name = com_layer.name
        self.kind = _layer_kind(com_layer)

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
        try:
            return self._layer.textItem.contents
        except HOST_ERRORS as e:
            raise HostAccessError(f"Could not read the text of {self.name}") from e

    @property
    def is_background(self):
        return bool(self._layer.isBackgroundLayer)


class PhotoshopGroup:

    def __init__(self, com_group, parent):
        self._group = com_group
        self.parent = parent
        self.name = com_group.name
        self._children = None

    def is_group(self):
        return True

    @property
    def children(self):
        if self._children is None:
            try:
                self._children = [wrap_layer(child, self) for child in self._group.layers]
            except HOST_ERRORS as e:
                raise HostAccessError(f"Could not read group {self.name}") from e
        return self._children


def wrap_layer(com_layer, parent):
    if com_layer.typename == "LayerSet":
        return PhotoshopGroup(com_layer, parent)
    return PhotoshopLayer(com_layer, parent)


class PhotoshopDocument:
    """
    The active document of a Photoshop session.

    :param document: A photoshop-python-api Document.
    """

    def __init__(self, document):
        self.document = document
        self.name = document.name
        try:
            path = document.path
        except HOST_ERRORS as e:
            raise PreconditionError(f"{self.name} has not been saved, there is no folder to export to.") from e
        self.path = str(path).replace("\\", "/").rstrip("/")
        self._children = None

    @property
    def children(self):
        if self._children is None:
            try:
                self._children = [wrap_layer(layer, self) for layer in self.document.app.layers]
            except HOST_ERRORS as e:
                raise HostAccessError(f"Could not read the layers of {self.name}") from e
        return self._children

    def groups(self):
        return [child for child in self.children if child.is_group()]

    def has_background_layer(self):
        bottom = self.children[-1]
        if bottom.is_group():
            return False
        return bottom.is_background


class PhotoshopEncoder:
    """
    Saves a copy of the visible document with Document.saveAs, the open
    document itself keeps its name and location.
    """

    def __init__(self, document):
        self.document = document

    def encode(self, path, options):
        try:
            self.document.document.saveAs(path, build_save_options(options), True)
        except HOST_ERRORS as e:
            raise EncodeError(f"Photoshop could not save {path}") from e


def build_save_options(options):
    """
    Translates SaveOptions into the save options object Photoshop expects.

    :param options: The SaveOptions of this run.

    :return: A JPEGSaveOptions or PNGSaveOptions instance.
    """
    if options.format != "jpeg":
        return ps.PNGSaveOptions()
    save_options = ps.JPEGSaveOptions()
    save_options.quality = options.quality
    save_options.embedColorProfile = options.embed_color_profile
    save_options.matte = MATTE_TYPES.get(options.matte, ps.MatteType.SemiGray)
    save_options.formatOptions = SCAN_TYPES.get(options.scans, ps.FormatOptionsType.StandardBaseline)
    return save_options


def supports_jpeg():
    return True


def open_active_document(session):
    """
    Wraps the document that is active in Photoshop.

    :param session: An open photoshop Session.

    :return: A PhotoshopDocument.
    """
    if session.app.documents.length == 0:
        raise PreconditionError("There is no active document in Photoshop.")
    return PhotoshopDocument(session.active_document)


def photoshop_session():
    return Session(action=None, auto_close=False)
