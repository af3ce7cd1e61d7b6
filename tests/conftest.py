"""Pytest fixtures.

This file adjusts sys.path for src-layout imports.
"""

# ruff: noqa: E402

import os
import sys

# Ensure `src` is on sys.path so imports like `from deltadoc.core...` resolve during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if os.path.isdir(SRC):
    sys.path.insert(0, SRC)
sys.path.insert(0, ROOT)

import pytest
from rich.traceback import install

from deltadoc.core.deltadoc import DeltaDoc
from deltadoc.core.mystique.mystique import Mystique
from tests.mocks.store.fake_store import FakeStore

# Enable readable tracebacks in development / test environments.
# Can be disabled with PYTEST_RICH=0
if os.getenv("PYTEST_RICH", "1") == "1":
    install(
        show_locals=True,  # show local variables for each frame
        width=None,  # use terminal width
        word_wrap=True,  # wrap long lines
        extra_lines=1,  # some context around lines
        suppress=["/usr/lib/python3", "site-packages"],  # hide "noisy" third-party frames
    )


@pytest.fixture
def store():
    """Provide an empty in-memory store acting as collection fetcher."""
    return FakeStore()


@pytest.fixture
def mystique():
    """Provide an isolated capability registry."""
    return Mystique()


@pytest.fixture
def deltadoc(store, mystique):
    """Provide a DeltaDoc wired to the in-memory store."""
    return DeltaDoc.create(config={}, collection_fetcher=store, mystique=mystique)


@pytest.fixture
def posts(deltadoc):
    """Provide the "posts" collection of the in-memory store."""
    return deltadoc.collection("posts")


@pytest.fixture
def posts_handle(store, posts):
    """Provide the fake handle backing the "posts" collection."""
    return posts.handle
