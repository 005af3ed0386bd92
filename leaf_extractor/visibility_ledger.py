import logging
from dataclasses import dataclass
from typing import Tuple

from leaf_extractor.leaf_records import is_visible

logger = logging.getLogger(__name__)


"""
Visibility ledger
Before any layer is switched off, the visibility of every collected leaf and
caption is written down. At the end of a run the ledger is played back once,
which leaves the document exactly as it was found.
"""


@dataclass(frozen=True)
class VisibilityLedger:
    leaf_states: Tuple[bool, ...]
    caption_states: Tuple[bool, ...]


def capture(leaves, captions):
    """
    Records whether each leaf and caption is visible, in collection order.

    :param leaves: The LeafRecords of this run.

    :param captions: The CaptionRecords of this run.

    :return: A VisibilityLedger aligned by index with both sequences.
    """
    return VisibilityLedger(
        leaf_states=tuple(is_visible(leaf) for leaf in leaves),
        caption_states=tuple(is_visible(caption) for caption in captions),
    )


def hide_all(leaves, captions):
    """
    Switches off every leaf and caption.

    :return: The amount of layers that were visible before.
    """
    hidden = 0
    for record in list(leaves) + list(captions):
        if record.layer.visible:
            hidden += 1
        record.layer.visible = False
    logger.debug(f"Hid {hidden} visible layers")
    return hidden


def restore(ledger, leaves, captions):
    """
    Puts back the visibility recorded in the ledger. Records added after the
    ledger was captured have no entry and are left as they are.

    :param ledger: The ledger captured at the start of the run.

    :param leaves: The LeafRecords of this run.

    :param captions: The CaptionRecords of this run.
    """
    _play_back(ledger.leaf_states, leaves)
    _play_back(ledger.caption_states, captions)


def _play_back(states, records):
    if len(states) != len(records):
        logger.debug(f"Ledger holds {len(states)} entries for {len(records)} layers, "
                     f"restoring the first {min(len(states), len(records))}")
    for state, record in zip(states, records):
        record.layer.visible = state
