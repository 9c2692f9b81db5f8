"""Source model building: tree-sitter parse trees to structural trees."""

from .builder import SourceModelBuilder
from .languages import SKIP_DIRS, detect_language, get_supported_languages
from .syntax import (
    CallChain,
    ConstructorCallSite,
    FunctionDecl,
    Parameter,
    Selector,
    SourceUnit,
    Span,
    TypeDecl,
    TypeRef,
    chain_of,
    child_nodes,
    walk,
)
from .treesitter_parser import TreeSitterParser

__all__ = [
    "SourceModelBuilder",
    "TreeSitterParser",
    "SKIP_DIRS",
    "detect_language",
    "get_supported_languages",
    "CallChain",
    "ConstructorCallSite",
    "FunctionDecl",
    "Parameter",
    "Selector",
    "SourceUnit",
    "Span",
    "TypeDecl",
    "TypeRef",
    "chain_of",
    "child_nodes",
    "walk",
]
