"""
Model functions: the allow-listed predicate language embedded in models.

This package provides:
- parse_function: grammar check for lambda and block form source text
- compile_function: reconstruction of a callable from vetted source
- function_source: canonical source of a predicate, for serialization
- call_predicate: the calling convention the engine uses for predicates
"""

from .callables import ModelFunction, call_predicate, positional_arity
from .grammar import SAFE_BUILTIN_NAMES, FunctionForm, parse_function
from .reconstruct import canonical_source, compile_function
from .source import function_source

__all__ = [
    "ModelFunction",
    "FunctionForm",
    "SAFE_BUILTIN_NAMES",
    "parse_function",
    "canonical_source",
    "compile_function",
    "function_source",
    "call_predicate",
    "positional_arity",
]
