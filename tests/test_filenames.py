import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from notegraph.core.filenames import safe_filename


def test_basic():
    assert safe_filename("Hello World") == "Hello World"


def test_slashes():
    assert safe_filename("a/b\\c") == "a-b-c"


def test_forbidden_chars():
    assert safe_filename('What? "Why"') == "What_ _Why_"


def test_empty():
    with pytest.raises(ValueError):
        safe_filename("   ")


def test_reserved_windows():
    assert safe_filename("CON").startswith("_")


def test_unicode_normalization():
    a = safe_filename("\u00e9")
    b = safe_filename("e\u0301")
    assert a == b


def test_length_limit():
    assert len(safe_filename("x" * 500, max_len=50)) == 50
