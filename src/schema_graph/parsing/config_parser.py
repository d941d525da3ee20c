"""Parser for resolution config (.sgc) files.

    -- reference cycles in the source documentation
    seeds { LocalizedMethodFault, VirtualMachineSnapshotTree }
    limits { resolver: 100, composer: 100 }
    merge { policy: child_wins }

Every section is optional and may repeat; seed lists accumulate.
"""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from schema_graph.parsing.config_lexer import ConfigLexer
from schema_graph.types import MERGE_POLICY_NAMES, MergePolicy, ResolutionConfig

_LIMIT_KEYS = {
    "resolver": "resolver_round_cap",
    "composer": "composer_round_cap",
}


class ConfigParser:
    """Parser for .sgc config files."""

    tokens = ConfigLexer.tokens

    def __init__(self) -> None:
        self._lexer = ConfigLexer()
        self._parser: yacc.LRParser | None = None
        self._seeds: set[str] = set()
        self._settings: dict[str, Any] = {}

    def build(self, **kwargs) -> None:  # type: ignore
        self._lexer.build(debug=False, errorlog=yacc.NullLogger())
        kwargs.setdefault("debug", False)
        kwargs.setdefault("write_tables", False)
        kwargs.setdefault("errorlog", yacc.NullLogger())
        self._parser = yacc.yacc(module=self, **kwargs)

    def parse(self, text: str) -> ResolutionConfig:
        if self._parser is None:
            self.build()
        self._seeds = set()
        self._settings = {}
        self._lexer.lexer.lineno = 1
        self._parser.parse(text, lexer=self._lexer.lexer)
        return ResolutionConfig(seed_set=frozenset(self._seeds), **self._settings)

    # ---- Grammar rules ----

    def p_config_file(self, p: yacc.YaccProduction) -> None:
        """config_file : sections"""
        pass

    def p_sections_empty(self, p: yacc.YaccProduction) -> None:
        """sections : """
        pass

    def p_sections_multi(self, p: yacc.YaccProduction) -> None:
        """sections : sections section"""
        pass

    def p_section_seeds(self, p: yacc.YaccProduction) -> None:
        """section : SEEDS LBRACE ident_list opt_comma RBRACE
                   | SEEDS LBRACE RBRACE"""
        if len(p) == 6:
            self._seeds.update(p[3])

    def p_section_limits(self, p: yacc.YaccProduction) -> None:
        """section : LIMITS LBRACE limit_entries RBRACE"""
        pass

    def p_section_merge(self, p: yacc.YaccProduction) -> None:
        """section : MERGE LBRACE merge_entries RBRACE"""
        pass

    # ---- Limit entries: resolver: N ----

    def p_limit_entries_empty(self, p: yacc.YaccProduction) -> None:
        """limit_entries : """
        pass

    def p_limit_entries_multi(self, p: yacc.YaccProduction) -> None:
        """limit_entries : limit_entries limit_entry"""
        pass

    def p_limit_entry(self, p: yacc.YaccProduction) -> None:
        """limit_entry : IDENTIFIER COLON INTEGER opt_comma"""
        key = _LIMIT_KEYS.get(p[1])
        if key is None:
            raise ValueError(
                f"SGC: Unknown limit '{p[1]}' (line {p.lineno(1)}), expected one of {sorted(_LIMIT_KEYS)}"
            )
        self._settings[key] = p[3]

    # ---- Merge entries: policy: child_wins ----

    def p_merge_entries_empty(self, p: yacc.YaccProduction) -> None:
        """merge_entries : """
        pass

    def p_merge_entries_multi(self, p: yacc.YaccProduction) -> None:
        """merge_entries : merge_entries merge_entry"""
        pass

    def p_merge_entry(self, p: yacc.YaccProduction) -> None:
        """merge_entry : IDENTIFIER COLON IDENTIFIER opt_comma"""
        if p[1] != "policy":
            raise ValueError(f"SGC: Unknown merge setting '{p[1]}' (line {p.lineno(1)})")
        policy: MergePolicy | None = MERGE_POLICY_NAMES.get(p[3])
        if policy is None:
            raise ValueError(
                f"SGC: Unknown merge policy '{p[3]}', expected one of {sorted(MERGE_POLICY_NAMES)}"
            )
        self._settings["merge_policy"] = policy

    # ---- Shared rules ----

    def p_ident_list_single(self, p: yacc.YaccProduction) -> None:
        """ident_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_ident_list_multi(self, p: yacc.YaccProduction) -> None:
        """ident_list : ident_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_opt_comma_yes(self, p: yacc.YaccProduction) -> None:
        """opt_comma : COMMA"""
        pass

    def p_opt_comma_no(self, p: yacc.YaccProduction) -> None:
        """opt_comma : """
        pass

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"SGC: Syntax error at '{p.value}' (line {p.lineno})")
        raise SyntaxError("SGC: Unexpected end of input")
