"""Parser for the type fragment DSL.

A fragment file holds the records extracted from one document:

    -- VirtualMachineSnapshotTree.html
    type VirtualMachineSnapshotTree extends DynamicData {
        name: "xsd:string",
        childSnapshotList: VirtualMachineSnapshotTree[],
    }
    enum VirtualMachinePowerState { poweredOff, poweredOn, suspended }

Quoted values are primitive type descriptions, bare names are references
to other records. A trailing ``[]`` on a reference is accepted and
dropped, as scraped array types point at their element record.
"""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from schema_graph.parsing.fragment_lexer import FragmentLexer
from schema_graph.types import Fragment, Primitive, Reference, normalize_name


class FragmentParser:
    """Parser for type fragment files."""

    tokens = FragmentLexer.tokens

    def __init__(self) -> None:
        self.lexer = FragmentLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._source: str | None = None

    def p_file(self, p: yacc.YaccProduction) -> None:
        """file : statement_list"""
        p[0] = p[1]

    def p_statement_list_empty(self, p: yacc.YaccProduction) -> None:
        """statement_list : """
        p[0] = []

    def p_statement_list_multiple(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement_list statement"""
        p[0] = p[1] + [p[2]]

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : type_def
                     | enum_def"""
        p[0] = p[1]

    def p_type_def(self, p: yacc.YaccProduction) -> None:
        """type_def : TYPE type_name opt_extends LBRACE property_list RBRACE
                    | TYPE type_name opt_extends LBRACE property_list COMMA RBRACE"""
        p[0] = Fragment(
            name=p[2], properties=dict(p[5]), inherit_from=p[3], source=self._source
        )

    def p_type_def_empty(self, p: yacc.YaccProduction) -> None:
        """type_def : TYPE type_name opt_extends LBRACE RBRACE"""
        p[0] = Fragment(name=p[2], inherit_from=p[3], source=self._source)

    def p_type_name(self, p: yacc.YaccProduction) -> None:
        """type_name : IDENTIFIER"""
        p[0] = p[1]

    # Quoted names are raw document headings, e.g. "HostSystem (vim.HostSystem)"
    def p_type_name_heading(self, p: yacc.YaccProduction) -> None:
        """type_name : STRING"""
        name = normalize_name(p[1])
        if not name:
            raise ValueError(f"Empty type name '{p[1]}' (line {p.lineno(1)})")
        p[0] = name

    def p_opt_extends(self, p: yacc.YaccProduction) -> None:
        """opt_extends : EXTENDS type_name"""
        p[0] = p[2]

    def p_opt_extends_none(self, p: yacc.YaccProduction) -> None:
        """opt_extends : """
        p[0] = None

    def p_property_list_single(self, p: yacc.YaccProduction) -> None:
        """property_list : property"""
        p[0] = [p[1]]

    def p_property_list_multiple(self, p: yacc.YaccProduction) -> None:
        """property_list : property_list COMMA property"""
        p[0] = p[1] + [p[3]]

    def p_property(self, p: yacc.YaccProduction) -> None:
        """property : word COLON property_value"""
        p[0] = (p[1], p[3])

    def p_property_value_primitive(self, p: yacc.YaccProduction) -> None:
        """property_value : STRING"""
        p[0] = Primitive(p[1])

    def p_property_value_reference(self, p: yacc.YaccProduction) -> None:
        """property_value : IDENTIFIER
                          | IDENTIFIER LBRACKET RBRACKET"""
        p[0] = Reference(p[1])

    def p_enum_def(self, p: yacc.YaccProduction) -> None:
        """enum_def : ENUM type_name LBRACE constant_list RBRACE
                    | ENUM type_name LBRACE constant_list COMMA RBRACE"""
        p[0] = Fragment(name=p[2], enum_constants=frozenset(p[4]), source=self._source)

    def p_enum_def_empty(self, p: yacc.YaccProduction) -> None:
        """enum_def : ENUM type_name LBRACE RBRACE"""
        p[0] = Fragment(name=p[2], source=self._source)

    def p_constant_list_single(self, p: yacc.YaccProduction) -> None:
        """constant_list : constant"""
        p[0] = [p[1]]

    def p_constant_list_multiple(self, p: yacc.YaccProduction) -> None:
        """constant_list : constant_list COMMA constant"""
        p[0] = p[1] + [p[3]]

    def p_constant(self, p: yacc.YaccProduction) -> None:
        """constant : word
                    | STRING"""
        p[0] = p[1]

    # Keywords are valid property and constant names (e.g. a "type" property)
    def p_word(self, p: yacc.YaccProduction) -> None:
        """word : IDENTIFIER
                | TYPE
                | ENUM
                | EXTENDS"""
        p[0] = p[1]

    def p_error(self, p: yacc.YaccProduction) -> None:
        where = f" in {self._source}" if self._source else ""
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno}){where}")
        raise SyntaxError(f"Syntax error at end of input{where}")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        kwargs.setdefault("errorlog", yacc.NullLogger())
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str, source: str | None = None) -> list[Fragment]:
        """Parse fragment text and return the fragments in file order."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self._source = source
        self.lexer.lexer.lineno = 1
        fragments = self.parser.parse(data, lexer=self.lexer.lexer)
        return fragments or []
