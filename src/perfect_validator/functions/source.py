"""
Recover the source text of predicates embedded in a model.

Models built in Python usually carry ordinary lambdas and functions. To store
them, their source is located with ``inspect`` and ``ast`` and then run
through the same grammar the reconstructor uses, so a model that serializes
is guaranteed to deserialize.
"""

import ast
import inspect
import textwrap
from types import CodeType
from typing import Any, Callable, List, Optional

from ..core.exceptions import FunctionReconstructionError, SerializationError
from .callables import ModelFunction
from .reconstruct import canonical_source


def _compiled_lambda(text: str, node: ast.Lambda) -> Optional[CodeType]:
    segment = ast.get_source_segment(text, node)
    if segment is None:
        return None
    try:
        module_code = compile(f"({segment})", "<model-function>", "eval")
    except SyntaxError:
        return None
    for const in module_code.co_consts:
        if isinstance(const, CodeType) and const.co_name == "<lambda>":
            return const
    return None


def _same_code(left: CodeType, right: CodeType) -> bool:
    return (
        left.co_code == right.co_code
        and left.co_consts == right.co_consts
        and left.co_names == right.co_names
        and left.co_varnames == right.co_varnames
    )


def _narrow_lambdas(function: Callable[..., Any], text: str, candidates: List[ast.AST]) -> List[ast.AST]:
    """Keep the lambdas on the same line whose compiled code matches the function's."""
    matches = []
    for node in candidates:
        code = _compiled_lambda(text, node)
        if code is not None and _same_code(code, function.__code__):
            matches.append(node)
    # Lambdas with identical source serialize the same, so any of them will do
    if len({ast.dump(node) for node in matches}) == 1:
        return matches[:1]
    return matches or candidates


def _locate_node(function: Callable[..., Any], tree: ast.AST, text: str) -> ast.AST:
    code = function.__code__
    first_line = code.co_firstlineno
    arg_names = list(code.co_varnames[: code.co_argcount])
    is_lambda = function.__name__ == "<lambda>"

    candidates: List[ast.AST] = []
    for node in ast.walk(tree):
        if is_lambda and isinstance(node, ast.Lambda):
            if node.lineno == first_line and [arg.arg for arg in node.args.args] == arg_names:
                candidates.append(node)
        elif not is_lambda and isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            start = min([node.lineno] + [decorator.lineno for decorator in node.decorator_list])
            if node.name == function.__name__ and start == first_line:
                candidates.append(node)

    if is_lambda and len(candidates) > 1:
        candidates = _narrow_lambdas(function, text, candidates)

    if not candidates:
        raise SerializationError(f"Could not locate the source of {function.__qualname__}")
    if len(candidates) > 1:
        raise SerializationError(
            f"Ambiguous source for {function.__qualname__}: "
            f"{len(candidates)} candidates on line {first_line}"
        )
    return candidates[0]


def _extract_source(function: Callable[..., Any]) -> str:
    try:
        lines, _ = inspect.findsource(function)
    except (OSError, TypeError) as e:
        raise SerializationError(f"Source of {function.__qualname__} is not available: {e}") from e

    text = "".join(lines)
    try:
        tree = ast.parse(text)
    except SyntaxError as e:
        raise SerializationError(f"Could not parse the module defining {function.__qualname__}") from e

    node = _locate_node(function, tree, text)
    if isinstance(node, ast.Lambda):
        segment = ast.get_source_segment(text, node)
        if segment is None:
            raise SerializationError(f"Could not extract the source of {function.__qualname__}")
        # Parenthesized so continuation lines from an enclosing literal still parse
        return f"({segment})"

    if node.decorator_list:
        raise SerializationError(f"Decorated function {function.__qualname__} cannot be stored in a model")
    # Whole lines, so the body keeps its indentation relative to the def
    return textwrap.dedent("".join(lines[node.lineno - 1 : node.end_lineno]))


def function_source(function: Callable[..., Any]) -> str:
    """
    Return the canonical source text of a model predicate.

    Args:
        function: A ModelFunction, a lambda or a ``def`` function

    Returns:
        Canonical source accepted by ``compile_function``

    Raises:
        SerializationError: If the callable is not a plain function, its
            source cannot be found, or it falls outside the function grammar
            (for example because it closes over an outer variable)
    """
    if isinstance(function, ModelFunction):
        return function.source
    if not inspect.isfunction(function):
        raise SerializationError(
            f"Cannot serialize {function!r}: only lambdas and def functions can be stored in a model"
        )

    source = _extract_source(function)
    try:
        return canonical_source(source)
    except FunctionReconstructionError as e:
        raise SerializationError(f"Function {function.__qualname__} cannot be stored: {e}") from e
