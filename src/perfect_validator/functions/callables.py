"""
Callable wrapper for reconstructed model functions and the calling convention
the engine uses for every predicate.
"""

import inspect
from typing import Any, Callable, Optional, Tuple

from .grammar import FunctionForm


class ModelFunction:
    """
    A predicate rebuilt from vetted source text.

    Instances behave like the function they wrap and remember the canonical
    source they were built from, which is what gets written back on
    serialization. Two instances are equal when their canonical sources are.

    Attributes:
        source (str): Canonical source text
        params (Tuple[str, ...]): Positional parameter names
        form (FunctionForm): Lambda or block form
    """

    __slots__ = ("source", "params", "form", "_function")

    def __init__(self, source: str, params: Tuple[str, ...], form: FunctionForm, function: Callable[..., Any]):
        self.source = source
        self.params = params
        self.form = form
        self._function = function

    def __call__(self, *args: Any) -> Any:
        return self._function(*args)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ModelFunction) and self.source == other.source

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.source)

    def __repr__(self) -> str:
        return f"ModelFunction({self.source!r})"

    # Reconstructed functions are immutable; copies share the compiled code
    def __copy__(self) -> "ModelFunction":
        return self

    def __deepcopy__(self, memo: dict) -> "ModelFunction":
        return self


def positional_arity(function: Callable[..., Any]) -> Optional[int]:
    """
    Count the positional parameters a callable accepts.

    Returns:
        The number of positional parameters, or None when the callable
        accepts any number (``*args``) or has no inspectable signature
    """
    if isinstance(function, ModelFunction):
        return len(function.params)
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def call_predicate(function: Callable[..., Any], *args: Any) -> Any:
    """
    Call a model predicate with as many leading arguments as it accepts.

    Dependency validators are called with (own value, dependent value, full
    data); a predicate written as ``lambda method: method != "CASH"`` only
    receives the first of them.
    """
    arity = positional_arity(function)
    if arity is not None:
        args = args[:arity]
    return function(*args)
