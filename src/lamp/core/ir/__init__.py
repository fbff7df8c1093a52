"""
LAMP Intermediate Representation (IR) types.

The Code tree is the single representation shared by the parser, the map
literal and any downstream evaluator.
"""

from .code import (
    HEAD_POSITION_FIELD,
    HEAD_POSITION_FIELD_NAME,
    INT_MAX,
    INT_MIN,
    Character,
    Code,
    CodeNode,
    Float,
    Identifier,
    Integer,
    List,
    Map,
    StringLiteral,
)

__all__ = [
    "Code",
    "CodeNode",
    "Integer",
    "Float",
    "Character",
    "StringLiteral",
    "Identifier",
    "List",
    "Map",
    "HEAD_POSITION_FIELD",
    "HEAD_POSITION_FIELD_NAME",
    "INT_MIN",
    "INT_MAX",
]
