"""Parser for veval expressions."""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from veval.errors import ParseError
from veval.parsing.expr_lexer import ExprLexer
from veval.parsing.nodes import (
    Array,
    Binary,
    Call,
    Field,
    Index,
    Literal,
    MethodCall,
    Node,
    Paren,
    Path,
    RangeExpr,
    Reference,
    Unary,
)


class ExprParser:
    """LALR parser turning expression source into a syntax tree.

    The tree follows conventional precedence (`&&` binds tighter than `||`).
    The evaluator re-folds chains of binary operators with its own table, so
    the grouping here only matters where parentheses are involved.
    """

    tokens = ExprLexer.tokens

    # Operator precedence: loosest to tightest
    precedence = (
        ("nonassoc", "DOTDOT", "DOTDOTEQ"),
        ("left", "OROR"),
        ("left", "ANDAND"),
        ("left", "EQEQ", "NE", "LT", "GT", "LE", "GE"),
        ("left", "PLUS", "MINUS"),
        ("left", "STAR", "SLASH", "PERCENT"),
        ("right", "UNARY"),
    )

    def __init__(self) -> None:
        self.lexer = ExprLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_expression_range(self, p: yacc.YaccProduction) -> None:
        """expression : expression DOTDOT expression
                      | expression DOTDOTEQ expression"""
        p[0] = RangeExpr(start=p[1], end=p[3], inclusive=p[2] == "..=")

    def p_expression_binary(self, p: yacc.YaccProduction) -> None:
        """expression : expression OROR expression
                      | expression ANDAND expression
                      | expression EQEQ expression
                      | expression NE expression
                      | expression LT expression
                      | expression GT expression
                      | expression LE expression
                      | expression GE expression
                      | expression PLUS expression
                      | expression MINUS expression
                      | expression STAR expression
                      | expression SLASH expression
                      | expression PERCENT expression"""
        p[0] = Binary(op=p[2], left=p[1], right=p[3])

    def p_expression_unary(self, p: yacc.YaccProduction) -> None:
        """expression : MINUS expression %prec UNARY
                      | BANG expression %prec UNARY"""
        p[0] = Unary(op=p[1], operand=p[2])

    def p_expression_reference(self, p: yacc.YaccProduction) -> None:
        """expression : AMP expression %prec UNARY"""
        p[0] = Reference(operand=p[2])

    def p_expression_postfix(self, p: yacc.YaccProduction) -> None:
        """expression : postfix"""
        p[0] = p[1]

    def p_postfix_primary(self, p: yacc.YaccProduction) -> None:
        """postfix : primary"""
        p[0] = p[1]

    def p_postfix_method_call(self, p: yacc.YaccProduction) -> None:
        """postfix : postfix DOT IDENTIFIER LPAREN arguments RPAREN"""
        p[0] = MethodCall(receiver=p[1], method=p[3], args=p[5])

    def p_postfix_field(self, p: yacc.YaccProduction) -> None:
        """postfix : postfix DOT IDENTIFIER"""
        p[0] = Field(receiver=p[1], name=p[3])

    def p_postfix_index(self, p: yacc.YaccProduction) -> None:
        """postfix : postfix LBRACKET expression RBRACKET"""
        p[0] = Index(target=p[1], index=p[3])

    def p_primary_literal(self, p: yacc.YaccProduction) -> None:
        """primary : INTEGER
                   | FLOAT
                   | STRING
                   | TRUE
                   | FALSE"""
        p[0] = Literal(value=p[1])

    def p_primary_none(self, p: yacc.YaccProduction) -> None:
        """primary : NONE"""
        p[0] = Literal(value=None)

    def p_primary_path(self, p: yacc.YaccProduction) -> None:
        """primary : path"""
        p[0] = p[1]

    def p_primary_call(self, p: yacc.YaccProduction) -> None:
        """primary : path LPAREN arguments RPAREN"""
        p[0] = Call(func=p[1], args=p[3])

    def p_primary_array(self, p: yacc.YaccProduction) -> None:
        """primary : LBRACKET arguments RBRACKET"""
        p[0] = Array(elements=p[2])

    def p_primary_paren(self, p: yacc.YaccProduction) -> None:
        """primary : LPAREN expression RPAREN"""
        p[0] = Paren(inner=p[2])

    def p_path_single(self, p: yacc.YaccProduction) -> None:
        """path : IDENTIFIER"""
        p[0] = Path(segments=[p[1]])

    def p_path_segments(self, p: yacc.YaccProduction) -> None:
        """path : path PATHSEP IDENTIFIER"""
        p[0] = Path(segments=p[1].segments + [p[3]])

    def p_arguments_empty(self, p: yacc.YaccProduction) -> None:
        """arguments : """
        p[0] = []

    def p_arguments(self, p: yacc.YaccProduction) -> None:
        """arguments : argument_list
                     | argument_list COMMA"""
        p[0] = p[1]

    def p_argument_list_single(self, p: yacc.YaccProduction) -> None:
        """argument_list : expression"""
        p[0] = [p[1]]

    def p_argument_list_multiple(self, p: yacc.YaccProduction) -> None:
        """argument_list : argument_list COMMA expression"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise ParseError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise ParseError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        kwargs.setdefault("debug", False)
        kwargs.setdefault("write_tables", False)
        kwargs.setdefault("errorlog", yacc.NullLogger())
        self.parser = yacc.yacc(module=self, start="expression", **kwargs)

    def parse(self, data: str) -> Node:
        """Parse an expression string."""
        if self.parser is None:
            self.build()

        return self.parser.parse(data, lexer=self.lexer.lexer)


_default_parser: ExprParser | None = None


def parse_expression(text: str) -> Node:
    """Parse `text` with a shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = ExprParser()
    return _default_parser.parse(text)
