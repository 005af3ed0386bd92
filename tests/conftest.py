"""
pytest configuration and shared fakes

The fakes stand in for a host document: groups and layers shaped like the
adapters in leaf_extractor.psd_host and leaf_extractor.photoshop_host, an
encoder that records what was visible at each save, and an in-memory
filesystem.
"""

import pytest

from leaf_extractor.host_model import EncodeError, HostAccessError, LayerKind
from leaf_extractor.settings import select_save_options


class FakeLayer:

    def __init__(self, name, kind=LayerKind.NORMAL, visible=True, text=""):
        self.name = name
        self.kind = kind
        self.text = text
        self.parent = None
        self._visible = visible
        self.visibility_writes = 0

    def is_group(self):
        return False

    @property
    def visible(self):
        return self._visible

    @visible.setter
    def visible(self, value):
        self.visibility_writes += 1
        self._visible = value

    def __repr__(self):
        return f"FakeLayer({self.name!r}, {self.kind.name})"


class FakeGroup:

    def __init__(self, name, *children, broken=False):
        self.name = name
        self.parent = None
        self.broken = broken
        self._children = list(children)
        for child in self._children:
            child.parent = self

    def is_group(self):
        return True

    @property
    def children(self):
        if self.broken:
            raise HostAccessError(f"group {self.name} is locked")
        return self._children


class FakeDocument:

    def __init__(self, *children, name="test.psd", path="/docs", background=True):
        self.name = name
        self.path = path
        if background:
            children = (FakeLayer("Background"),) + children
        self.children = list(children)
        self.background = background
        for child in self.children:
            child.parent = self

    def groups(self):
        return [child for child in self.children if child.is_group()]

    def has_background_layer(self):
        return self.background

    def all_layers(self):
        layers = []
        stack = list(self.children)
        while stack:
            node = stack.pop()
            if node.is_group():
                stack.extend(node._children)
            else:
                layers.append(node)
        return layers


class FakeEncoder:

    def __init__(self, document=None, failing_paths=(), error=None):
        self.document = document
        self.failing_paths = set(failing_paths)
        self.error = error
        self.calls = []
        self.visible_at_save = {}

    def encode(self, path, options):
        self.calls.append((path, options))
        if self.document is not None:
            self.visible_at_save[path] = {
                layer.name + ":" + layer.kind.name
                for layer in self.document.all_layers() if layer.visible
            }
        if self.error is not None:
            raise self.error
        if path in self.failing_paths:
            raise EncodeError(f"disk full while writing {path}")


class FakeFilesystem:

    def __init__(self, existing=(), failing=()):
        self.directories = set(existing)
        self.failing = set(failing)
        self.files = {}
        self.calls = 0

    def directory_exists(self, path):
        self.calls += 1
        return path in self.directories

    def create_directory(self, path):
        self.calls += 1
        if path in self.failing:
            raise PermissionError(f"permission denied: {path}")
        self.directories.add(path)

    def write_text_file(self, path, content):
        self.calls += 1
        if path.rsplit("/", 1)[0] in self.failing:
            raise PermissionError(f"permission denied: {path}")
        self.files[path] = content


class FakeProgress:

    def __init__(self):
        self.statuses = []
        self.alerts = []
        self.closed = False

    def set_status(self, text):
        self.statuses.append(text)

    def alert(self, text):
        self.alerts.append(text)

    def close(self):
        self.closed = True


@pytest.fixture
def jpeg_options():
    return select_save_options(True)


@pytest.fixture
def filesystem():
    return FakeFilesystem()


@pytest.fixture
def progress():
    return FakeProgress()


@pytest.fixture
def nested_document():
    """A/B holds Leaf1, A holds a smart object and its caption, C holds a caption only."""
    leaf = FakeLayer("Leaf1")
    smart = FakeLayer("Logo", kind=LayerKind.SMART_OBJECT, visible=False)
    caption = FakeLayer("Logo", kind=LayerKind.TEXT, text="Company logo")
    lonely_caption = FakeLayer("Note", kind=LayerKind.TEXT, text="A note", visible=False)
    shape = FakeLayer("Frame", kind=LayerKind.OTHER)
    group_b = FakeGroup("B", leaf)
    group_a = FakeGroup("A", group_b, smart, caption, shape)
    group_c = FakeGroup("C", lonely_caption)
    return FakeDocument(group_a, group_c)
