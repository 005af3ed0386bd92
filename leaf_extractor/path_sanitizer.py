"""
Filename sanitizing
Layer and group names end up as folder and file names, so every character
Windows refuses in a filename is swapped for an underscore.
"""

RESTRICTED_CHARACTERS = '\\/:"*?<>|'
REPLACEMENT = "_"

_TRANSLATION = str.maketrans({char: REPLACEMENT for char in RESTRICTED_CHARACTERS})


def sanitize(raw):
    """
    Replaces the restricted characters of a name with underscores. All other
    characters, non-ASCII included, are kept as they are, so the result has
    the same length as the input.

    :param raw: A layer or group name.

    :return: The name, safe to use as a single path segment.
    """
    return raw.translate(_TRANSLATION)
