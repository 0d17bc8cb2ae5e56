"""Tests for recovering the source of Python predicates."""

import pytest

from perfect_validator.core.exceptions import SerializationError
from perfect_validator.functions import compile_function, function_source


def is_positive(value):
    return value > 0


def test_lambda_source():
    """Test that a lambda in a literal is located and canonicalized."""
    rule = {
        "validate": lambda value: value % 2 == 0,
    }
    assert function_source(rule["validate"]) == "lambda value: value % 2 == 0"


def test_def_source():
    """Test that a module level def is recovered as a block."""
    source = function_source(is_positive)
    assert source.startswith("def is_positive(value):")
    assert compile_function(source)(3) is True


def test_model_function_source():
    """Test that a rebuilt function serializes to its own source."""
    assert function_source(compile_function("lambda x: x")) == "lambda x: x"


def test_closures_are_rejected():
    """Test that a predicate reading an outer variable cannot be stored."""
    limit = 10
    check = lambda value: value < limit  # noqa: E731
    with pytest.raises(SerializationError, match="cannot be stored"):
        function_source(check)


def test_builtin_callables_are_rejected():
    """Test that only plain functions can be stored."""
    with pytest.raises(SerializationError):
        function_source(len)


def test_lambdas_sharing_a_line():
    """Test that same-signature lambdas on one line each recover their own source."""
    pair = (lambda x: x > 1, lambda x: x < 1)
    assert function_source(pair[0]) == "lambda x: x > 1"
    assert function_source(pair[1]) == "lambda x: x < 1"


def test_identical_lambdas_on_one_line():
    """Test that lambdas with identical source on one line serialize the same."""
    pair = (lambda x: x > 1, lambda x: x > 1)
    assert function_source(pair[0]) == function_source(pair[1]) == "lambda x: x > 1"
