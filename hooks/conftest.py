"""pytest adapter for the script-style test suites in this directory.

Each test module defines its own TestRunner and a set of
``test_*(runner)`` functions. Under pytest every function gets a fresh
runner and fails if any of its assertions recorded a failure.
"""
import sys
from pathlib import Path

import pytest

lib_path = Path(__file__).parent / 'lib'
sys.path.insert(0, str(lib_path))


@pytest.fixture
def runner(request):
    test_runner = request.module.TestRunner()
    yield test_runner
    assert test_runner.failed == 0, "; ".join(test_runner.errors)
