"""Tests for the model function grammar."""

import pytest

from perfect_validator.core.exceptions import FunctionReconstructionError
from perfect_validator.functions import FunctionForm, parse_function


def test_lambda_form():
    """Test that a lambda is accepted."""
    node, form = parse_function("lambda total, data: total > 1000 and data is not None")
    assert form is FunctionForm.LAMBDA
    assert [arg.arg for arg in node.args.args] == ["total", "data"]


def test_block_form():
    """Test that a single def is accepted, including local names and loops."""
    source = """
    def count_features(features):
        total = 0
        for feature in features:
            if feature.startswith("x"):
                continue
            total += 1
        return total <= 3
    """
    _, form = parse_function(source)
    assert form is FunctionForm.BLOCK


def test_annotations_are_ignored():
    """Test that annotations do not count as loaded names."""
    _, form = parse_function("def check(value: Decimal) -> bool:\n    return value > 0")
    assert form is FunctionForm.BLOCK


@pytest.mark.parametrize(
    "source",
    [
        "",
        "   ",
        "while(true){}",
        "def f(x):\n    while True:\n        pass",
        "x + 1",
        "lambda x: x\nlambda y: y",
        "lambda x=1: x",
        "lambda *args: args",
        "lambda x, **kwargs: x",
        "lambda x: limit > x",
        "lambda x: __import__('os')",
        "lambda x: x.__class__",
        "lambda x: x._private",
        "lambda x: '{0.__class__}'.format(x)",
        "lambda x: open('/etc/passwd')",
        "lambda x: eval('1')",
        "lambda x: (yield x)",
        "def f(x):\n    import os\n    return True",
        "def f(x):\n    global y\n    return True",
        "def f(x):\n    def g():\n        return 1\n    return g()",
        "def f(x):\n    with open(x) as fh:\n        return True",
        "def f(x):\n    try:\n        return True\n    except Exception:\n        return False",
        "@decorator\ndef f(x):\n    return x",
        "class A:\n    pass",
        "async def f(x):\n    return x",
        "lambda x: [y := 1]",
    ],
)
def test_rejected_sources(source):
    """Test that sources outside the grammar are refused."""
    with pytest.raises(FunctionReconstructionError, match="Invalid function format"):
        parse_function(source)


def test_non_string_source():
    """Test that non-text input is refused."""
    with pytest.raises(FunctionReconstructionError):
        parse_function(42)


def test_rejection_keeps_source():
    """Test that the offending source is attached to the error."""
    with pytest.raises(FunctionReconstructionError) as exc_info:
        parse_function("lambda x: os.system(x)")
    assert exc_info.value.source == "lambda x: os.system(x)"
