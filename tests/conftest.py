"""Shared pytest fixtures and configuration for the tubeport test suite.

Guidelines
----------
* No internet access in any test.
* Stores, streams and the notifier are mocked at the protocol boundary.
* Codec tests are pure — plain strings in, records out.
* Filesystem tests use ``tmp_path`` only.
"""

from __future__ import annotations

import pytest

from tubeport.core.models import CodecContext


@pytest.fixture
def context() -> CodecContext:
    return CodecContext()
