# Make `import altfins_alerts` work without installing the package
import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(__file__))

if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from helpers import FakeNotifier  # noqa: E402


@pytest.fixture
def notifier():
    return FakeNotifier()
