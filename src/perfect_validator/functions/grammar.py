"""
Allow-listed grammar for model functions.

Model functions are small predicates stored inside a validation model. Their
source text is accepted in exactly two shapes:

- lambda form: ``lambda a, b: <expression>``
- block form: ``def name(a, b):`` followed by an indented body

The source is parsed with ``ast`` and every node is checked against an
explicit allow-list before anything is compiled. Names that are read must be
parameters, names bound inside the function, or one of ``SAFE_BUILTINS``.
Attribute names starting with ``_`` (and a few introspection helpers) are
refused, which keeps object internals such as ``__globals__`` out of reach.
"""

import ast
import builtins
import textwrap
from enum import Enum
from typing import Dict, FrozenSet, Set, Tuple, Union

from ..core.exceptions import FunctionReconstructionError

FunctionNode = Union[ast.Lambda, ast.FunctionDef]


class FunctionForm(str, Enum):
    """The two accepted surface forms."""

    LAMBDA = "lambda"
    BLOCK = "block"


SAFE_BUILTIN_NAMES: FrozenSet[str] = frozenset(
    {
        "abs",
        "all",
        "any",
        "bool",
        "dict",
        "enumerate",
        "float",
        "int",
        "isinstance",
        "len",
        "list",
        "max",
        "min",
        "range",
        "reversed",
        "round",
        "set",
        "sorted",
        "str",
        "sum",
        "tuple",
        "zip",
        "ValueError",
        "TypeError",
    }
)

SAFE_BUILTINS: Dict[str, object] = {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}

# Attribute names that give access to interpreter internals without a leading underscore
DENIED_ATTRIBUTES: FrozenSet[str] = frozenset(
    {
        "format",
        "format_map",
        "mro",
        "gi_frame",
        "gi_code",
        "cr_frame",
        "cr_code",
        "ag_frame",
        "ag_code",
        "f_globals",
        "f_locals",
        "f_builtins",
        "f_back",
        "tb_frame",
        "tb_next",
    }
)

_ALLOWED_NODES: Tuple[type, ...] = (
    # statements (block form only)
    ast.Return,
    ast.Assign,
    ast.AugAssign,
    ast.If,
    ast.For,
    ast.Break,
    ast.Continue,
    ast.Pass,
    ast.Expr,
    ast.Raise,
    ast.Assert,
    # expressions
    ast.BoolOp,
    ast.BinOp,
    ast.UnaryOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.keyword,
    ast.Name,
    ast.Constant,
    ast.Attribute,
    ast.Subscript,
    ast.Slice,
    ast.List,
    ast.Tuple,
    ast.Dict,
    ast.Set,
    ast.ListComp,
    ast.SetComp,
    ast.DictComp,
    ast.GeneratorExp,
    ast.comprehension,
    ast.JoinedStr,
    ast.FormattedValue,
    ast.Lambda,
    ast.arguments,
    ast.arg,
    # contexts and operators
    ast.Load,
    ast.Store,
    ast.And,
    ast.Or,
    ast.Not,
    ast.UAdd,
    ast.USub,
    ast.Invert,
    ast.Add,
    ast.Sub,
    ast.Mult,
    ast.Div,
    ast.FloorDiv,
    ast.Mod,
    ast.Pow,
    ast.BitAnd,
    ast.BitOr,
    ast.BitXor,
    ast.Eq,
    ast.NotEq,
    ast.Lt,
    ast.LtE,
    ast.Gt,
    ast.GtE,
    ast.Is,
    ast.IsNot,
    ast.In,
    ast.NotIn,
)


def _reject(message: str, source: str) -> FunctionReconstructionError:
    return FunctionReconstructionError(f"Invalid function format: {message}", source=source)


def _check_arguments(args: ast.arguments, source: str) -> None:
    """Only plain positional parameters without defaults are accepted."""
    if args.posonlyargs or args.vararg or args.kwonlyargs or args.kwarg:
        raise _reject("only plain positional parameters are allowed", source)
    if args.defaults or args.kw_defaults:
        raise _reject("parameter defaults are not allowed", source)
    for arg in args.args:
        if arg.arg.startswith("__"):
            raise _reject(f"parameter name '{arg.arg}' is not allowed", source)


class _GrammarChecker(ast.NodeVisitor):
    """Walks a function body and raises on the first construct outside the allow-list."""

    def __init__(self, source: str):
        self.source = source
        self.bound: Set[str] = set()
        self.loaded: Set[str] = set()

    def generic_visit(self, node: ast.AST) -> None:
        if not isinstance(node, _ALLOWED_NODES):
            raise _reject(f"'{type(node).__name__}' is not allowed", self.source)
        super().generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("__"):
            raise _reject(f"name '{node.id}' is not allowed", self.source)
        if isinstance(node.ctx, ast.Store):
            self.bound.add(node.id)
        else:
            self.loaded.add(node.id)
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith("_") or node.attr in DENIED_ATTRIBUTES:
            raise _reject(f"attribute '{node.attr}' is not allowed", self.source)
        self.generic_visit(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        _check_arguments(node.args, self.source)
        self.bound.update(arg.arg for arg in node.args.args)
        self.generic_visit(node)


def _strip_annotations(node: FunctionNode) -> None:
    """Annotations are documentation only; they are dropped before checking."""
    for arg in node.args.args:
        arg.annotation = None
        arg.type_comment = None
    if isinstance(node, ast.FunctionDef):
        node.returns = None
        node.type_comment = None


def parse_function(source: object) -> Tuple[FunctionNode, FunctionForm]:
    """
    Parse and vet function source text.

    Args:
        source: Source text of a lambda or of a single ``def`` block

    Returns:
        Tuple of the vetted AST node and its form

    Raises:
        FunctionReconstructionError: If the text is not one of the two
            accepted shapes or uses a construct outside the allow-list
    """
    if not isinstance(source, str) or not source.strip():
        raise FunctionReconstructionError("Invalid function format: empty source", source=str(source))

    text = textwrap.dedent(source).strip()
    try:
        module = ast.parse(text, mode="exec")
    except SyntaxError as e:
        raise _reject(f"could not parse source ({e.msg})", source) from e

    if len(module.body) != 1:
        raise _reject("expected exactly one lambda or def", source)

    statement = module.body[0]
    node: FunctionNode
    if isinstance(statement, ast.Expr) and isinstance(statement.value, ast.Lambda):
        node = statement.value
        form = FunctionForm.LAMBDA
    elif isinstance(statement, ast.FunctionDef):
        node = statement
        form = FunctionForm.BLOCK
        if node.decorator_list:
            raise _reject("decorators are not allowed", source)
        if node.name.startswith("__"):
            raise _reject(f"function name '{node.name}' is not allowed", source)
        if getattr(node, "type_params", None):
            raise _reject("type parameters are not allowed", source)
    else:
        raise _reject("expected 'lambda params: expression' or 'def name(params): ...'", source)

    _check_arguments(node.args, source)
    _strip_annotations(node)

    checker = _GrammarChecker(source)
    params = [arg.arg for arg in node.args.args]
    checker.bound.update(params)
    body = [node.body] if isinstance(node, ast.Lambda) else node.body
    for child in body:
        checker.visit(child)

    unknown = sorted(checker.loaded - checker.bound - SAFE_BUILTIN_NAMES)
    if unknown:
        raise _reject(f"unknown name(s): {', '.join(unknown)}", source)

    return node, form
