"""Configuration for the Go complexity analyzer.

Threshold defaults used by the checks in code_analysis.py, and the
tree-sitter language configuration that maps Go grammar node types onto the
concepts the analyzer measures (functions, statements, if constructs).
"""

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Analysis thresholds (a finding requires strictly exceeding the limit)
# ---------------------------------------------------------------------------

DEFAULT_THRESHOLDS = {
    "statements": 30,
    "params": 5,
    "results": 5,
    "if_chain": 2,
    "if_body": 20,
}

DEFAULT_TEST_FILE_PATTERN = "*_test.go"


@dataclass(frozen=True)
class Thresholds:
    """Limits and toggles for one run. Built once, never mutated."""

    statements: int = DEFAULT_THRESHOLDS["statements"]
    params: int = DEFAULT_THRESHOLDS["params"]
    results: int = DEFAULT_THRESHOLDS["results"]
    if_chain: int = DEFAULT_THRESHOLDS["if_chain"]
    if_body: int = DEFAULT_THRESHOLDS["if_body"]
    check_bool_params: bool = True
    ignore_test_files: bool = True
    test_file_pattern: str = DEFAULT_TEST_FILE_PATTERN


# ---------------------------------------------------------------------------
# Node type mappings for the Go grammar
# ---------------------------------------------------------------------------

GO_CONFIG = {
    "grammar_module": "tree_sitter_go",
    "language_func": "language",
    "file_extensions": {".go"},
    "function_types": {"function_declaration", "method_declaration"},
    "if_type": "if_statement",
    "labeled_type": "labeled_statement",
    "package_type": "package_clause",
    "block_type": "block",
    "statement_list_type": "statement_list",
    "bool_type": "bool",
    "parameter_types": {"parameter_declaration", "variadic_parameter_declaration"},
    # Node kinds go/ast classifies as ast.Stmt.
    "statement_types": {
        "block",
        "break_statement",
        "communication_case",
        "const_declaration",
        "continue_statement",
        "dec_statement",
        "default_case",
        "defer_statement",
        "empty_statement",
        "expression_case",
        "expression_statement",
        "fallthrough_statement",
        "for_statement",
        "go_statement",
        "goto_statement",
        "if_statement",
        "inc_statement",
        "labeled_statement",
        "receive_statement",
        "return_statement",
        "select_statement",
        "send_statement",
        "short_var_declaration",
        "assignment_statement",
        "type_case",
        "type_declaration",
        "type_switch_statement",
        "var_declaration",
        "expression_switch_statement",
    },
    # Statements go/ast materializes that tree-sitter folds into the parent:
    # the clause body block of switch/select, plus the type switch guard.
    "implicit_statements": {
        "expression_switch_statement": 1,
        "type_switch_statement": 2,
        "select_statement": 1,
    },
}
