from enum import Enum


"""
Host model
The exporter never talks to Photoshop or to a PSD file directly. Both hosts are
wrapped in small adapter objects that look the same to the rest of the code:

    Document: name, path, children, groups(), has_background_layer()
    Group:    name, parent, children, is_group() -> True
    Layer:    name, parent, kind, visible (read/write), text, is_group() -> False

This module holds the layer kinds every adapter maps onto, and the exceptions
adapters raise when the host misbehaves.
"""


class LayerKind(Enum):
    NORMAL = "normal"
    SMART_OBJECT = "smartobject"
    TEXT = "text"
    OTHER = "other"


EXPORTABLE_KINDS = (LayerKind.NORMAL, LayerKind.SMART_OBJECT)


class LeafExtractorError(Exception):
    """Base class for every error raised on purpose by this package."""


class HostAccessError(LeafExtractorError):
    """A group or layer of the host document could not be read."""


class EncodeError(LeafExtractorError):
    """The host failed to write the visible composite to a file."""


class PreconditionError(LeafExtractorError):
    """There is no document to export from."""


def is_exportable(node):
    """
    Checks whether a node is a leaf that gets its own image file.

    :param node: A group or layer of a host document.

    :return: True for Normal and SmartObject layers.
    """
    return not node.is_group() and node.kind in EXPORTABLE_KINDS


def is_caption(node):
    return not node.is_group() and node.kind is LayerKind.TEXT
