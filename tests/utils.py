"""Test helpers and shared constants."""

PATH_MOCK = "tests/mocks"

#: Import path prefix of the capabilities shipped with the test suite
CAPABILITIES_MODULE = "tests.mocks.capabilities.blog_capabilities"


def capability_path(attribute: str) -> str:
    """Return the "module:attribute" import path of a test capability."""
    return f"{CAPABILITIES_MODULE}:{attribute}"
