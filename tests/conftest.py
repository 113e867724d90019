"""
Shared test fixtures.
The sample registry in tests/data is a small excerpt of the real IANA
registry (plus a few made-up records for edge cases).
"""

import sys
import os
import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


@pytest.fixture
def registry_path():
    return os.path.join(DATA_DIR, "language-subtag-registry.txt")


@pytest.fixture
def registry_text(registry_path):
    with open(registry_path, encoding="utf8") as infile:
        return infile.read()


@pytest.fixture
def parsed(registry_text):
    from registryparse import parse_registry
    return parse_registry(registry_text)


@pytest.fixture
def index(parsed):
    from tagindex import TagIndex
    return TagIndex(parsed.records)
