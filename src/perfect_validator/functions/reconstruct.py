"""
Restricted function reconstructor.

Turns vetted source text back into a live callable. Only the AST that passed
the allow-list in ``grammar`` is compiled, and it runs with ``SAFE_BUILTINS``
as its only builtins, so stored text can define a predicate with exactly the
declared parameters and body and nothing else.
"""

import ast
import logging

from ..core.exceptions import FunctionReconstructionError
from .callables import ModelFunction
from .grammar import SAFE_BUILTINS, FunctionForm, parse_function

logger = logging.getLogger(__name__)

_FILENAME = "<model-function>"


def canonical_source(source: str) -> str:
    """
    Return the canonical text of function source.

    The lambda form always canonicalizes to a single line. The block form
    keeps its line structure because Python blocks are indentation based.

    Raises:
        FunctionReconstructionError: If the source is outside the grammar
    """
    node, _ = parse_function(source)
    return ast.unparse(node)


def compile_function(source: str) -> ModelFunction:
    """
    Build a callable from function source text.

    Args:
        source: ``lambda ...: ...`` or a single ``def`` block

    Returns:
        ModelFunction wrapping the compiled callable

    Raises:
        FunctionReconstructionError: If the text is outside the grammar or
            cannot be compiled

    Example:
        >>> is_adult = compile_function("lambda age: age >= 18")
        >>> is_adult(21)
        True
    """
    node, form = parse_function(source)
    canonical = ast.unparse(node)
    params = tuple(arg.arg for arg in node.args.args)
    namespace = {"__builtins__": SAFE_BUILTINS}

    try:
        if form is FunctionForm.LAMBDA:
            expression = ast.fix_missing_locations(ast.Expression(body=node))
            function = eval(compile(expression, _FILENAME, "eval"), namespace)
        else:
            module = ast.fix_missing_locations(ast.Module(body=[node], type_ignores=[]))
            exec(compile(module, _FILENAME, "exec"), namespace)
            function = namespace[node.name]
    except (SyntaxError, ValueError, TypeError) as e:
        raise FunctionReconstructionError(f"Failed to compile function: {e}", source=source) from e

    logger.debug(f"Reconstructed {form.value} function with params {params}")
    return ModelFunction(canonical, params, form, function)
