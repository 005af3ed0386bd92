import dataclasses
import logging

from leaf_extractor.host_model import HostAccessError, is_caption, is_exportable
from leaf_extractor.leaf_records import CollectionResult, build_caption_record, build_leaf_record

logger = logging.getLogger(__name__)


"""
Layer tree collection
Finds every leaf and every caption inside the groups of a document. Layers
lying loose at the top of the document are not part of any group and are left
alone.
"""


def collect(document, extension):
    """
    Walks all groups of a document with a stack and sorts their children into
    leaves and captions. Nested groups are pushed onto the stack, so the order
    of the result does not follow the stacking order of the document.

    When the host fails to hand over the contents of a group, collection stops
    right there and whatever was found up to that point is returned.

    :param document: The host document to collect from.

    :param extension: The file extension every leaf will be saved with.

    :return: A CollectionResult with the leaf and caption records.
    """
    result = CollectionResult()
    try:
        stack = list(document.groups())
        while stack:
            group = stack.pop()
            for child in group.children:
                if child.is_group():
                    stack.append(child)
                elif is_exportable(child):
                    result.leaves.append(build_leaf_record(child, document, extension))
                elif is_caption(child):
                    result.captions.append(build_caption_record(child, document))
    except HostAccessError as e:
        logger.error(f"Stopped collecting layers of {document.name}: {e}")
        result.leaves = drop_unrecorded_captions(result.leaves, result.captions)
    logger.debug(f"Collected {len(result.leaves)} leaves and {len(result.captions)} captions")
    return result


def drop_unrecorded_captions(leaves, captions):
    """
    A collection that stopped early can hold leaves paired with a text layer
    that never got a CaptionRecord of its own. Such a text layer would be
    toggled during export without its visibility being written down, so the
    pairing is removed.

    :param leaves: The LeafRecords collected so far.

    :param captions: The CaptionRecords collected so far.

    :return: The leaves, only paired with captions that were collected.
    """
    recorded = {id(caption.layer) for caption in captions}
    kept = []
    for leaf in leaves:
        if leaf.caption is not None and id(leaf.caption) not in recorded:
            logger.warning(f"Leaf {leaf.name} is exported without its caption")
            leaf = dataclasses.replace(leaf, caption=None)
        kept.append(leaf)
    return kept
