from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from leaf_extractor.host_model import is_caption
from leaf_extractor.path_sanitizer import sanitize
from leaf_extractor.settings import CAPTION_EXTENSION


"""
Leaf and caption records
A record ties one host layer to the file it will be written to. Records are
built once while the layer tree is collected and never change afterwards; the
layer itself stays owned by the host document.
"""


@dataclass(frozen=True)
class LeafRecord:
    layer: Any = field(repr=False)
    name: str
    kind: Any
    ancestry: Tuple[str, ...]
    output_path: str
    caption: Optional[Any] = field(default=None, repr=False)

    @property
    def ancestry_path(self):
        return "/".join(self.ancestry)


@dataclass(frozen=True)
class CaptionRecord:
    layer: Any = field(repr=False)
    name: str
    ancestry: Tuple[str, ...]
    text: str
    output_path: str


@dataclass
class CollectionResult:
    leaves: list = field(default_factory=list)
    captions: list = field(default_factory=list)


def trace_ancestry(layer, document):
    """
    Walks up the parents of a layer until the document itself is reached.

    :param layer: A layer somewhere inside the group tree of the document.

    :param document: The document the layer belongs to.

    :return: A tuple with the sanitized group names, outermost group first.
    """
    names = []
    parent = layer.parent
    while parent is not None and parent is not document:
        names.append(sanitize(parent.name))
        parent = parent.parent
    names.reverse()
    return tuple(names)


def find_caption(layer):
    """
    Looks for a text layer with exactly the same name as the given layer,
    among the direct children of its parent group. The first match wins.

    :param layer: A leaf layer.

    :return: The matching text layer, or None when there is none.
    """
    parent = layer.parent
    if parent is None:
        return None
    for sibling in parent.children:
        if sibling is not layer and is_caption(sibling) and sibling.name == layer.name:
            return sibling
    return None


def build_leaf_record(layer, document, extension):
    ancestry = trace_ancestry(layer, document)
    folder = "/".join((document.path,) + ancestry)
    output_path = f"{folder}/{sanitize(layer.name)}.{extension}"
    return LeafRecord(
        layer=layer,
        name=layer.name,
        kind=layer.kind,
        ancestry=ancestry,
        output_path=output_path,
        caption=find_caption(layer),
    )


def build_caption_record(layer, document):
    """
    Captions are stored in a single folder per group chain, named after the
    ancestry joined with underscores, e.g. <document folder>/A_B/name.txt.
    """
    ancestry = trace_ancestry(layer, document)
    folder = f"{document.path}/{'_'.join(ancestry)}" if ancestry else document.path
    return CaptionRecord(
        layer=layer,
        name=layer.name,
        ancestry=ancestry,
        text=layer.text or "",
        output_path=f"{folder}/{sanitize(layer.name)}.{CAPTION_EXTENSION}",
    )


def output_directory(record):
    return record.output_path.rsplit("/", 1)[0]


def show(record):
    record.layer.visible = True
    if getattr(record, "caption", None) is not None:
        record.caption.visible = True


def hide(record):
    record.layer.visible = False
    if getattr(record, "caption", None) is not None:
        record.caption.visible = False


def is_visible(record):
    return bool(record.layer.visible)
