import pytest

from iconlink.core.icons import Icon, IconTables
from iconlink.core.scheduler import DeferredQueue
from iconlink.core.storage import CacheStore


def make_tables() -> IconTables:
    files = [
        Icon(0, "icon-js", ("medium-yellow", "dark-yellow")),
        Icon(1, "python-icon", ("medium-blue", "dark-blue")),
        Icon(2, "text-icon"),
    ]
    dirs = [
        Icon(0, "icon-file-directory", ("medium-blue", "dark-blue")),
        Icon(1, "git-icon", ("medium-red", "dark-red")),
    ]
    return IconTables(file_icons=files, directory_icons=dirs)


@pytest.fixture
def tables() -> IconTables:
    return make_tables()


@pytest.fixture
def cache() -> CacheStore:
    return CacheStore()


@pytest.fixture
def scheduler() -> DeferredQueue:
    return DeferredQueue()


class QueryRecorder:
    """Strategy query stub: records calls and optionally runs a callback."""

    def __init__(self, on_query=None):
        self.calls = []
        self.on_query = on_query

    def __call__(self, resource):
        self.calls.append(resource.path)
        if self.on_query is not None:
            self.on_query(resource)


@pytest.fixture
def query() -> QueryRecorder:
    return QueryRecorder()


@pytest.fixture
def make_query():
    return QueryRecorder
