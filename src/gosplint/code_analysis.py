"""Tree-sitter complexity analysis for Go source files.

Flags functions whose shape suggests they need refactoring: too many
statements, parameters or results, bool parameters, empty or long if
bodies, and long if/else-if chains.

Pure measurement functions operate on tree-sitter nodes. analyze_source()
parses a source string and records findings on a Report. run_analysis()
drives a whole run over a list of files.
"""

import fnmatch
import importlib
import os
from collections.abc import Callable

from tree_sitter import Language, Parser

from gosplint.config import GO_CONFIG, Thresholds
from gosplint.report import Category, Finding, Position, Report
from gosplint.utils import log


class ParseError(Exception):
    """A file could not be read or turned into a syntax tree."""


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def walk_tree(node, visit: Callable) -> None:
    """Visit node and its named descendants in document order.

    visit(n) returns whether to descend into n's children. Uses an explicit
    stack so deeply nested code cannot exhaust the recursion limit.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if visit(current):
            stack.extend(reversed(current.named_children))


def position_of(node, filename: str) -> Position:
    row, column = node.start_point[0], node.start_point[1]
    return Position(filename=filename, line=row + 1, column=column + 1, offset=node.start_byte)


# ---------------------------------------------------------------------------
# Pure measurement functions
# ---------------------------------------------------------------------------


def statement_count(node, config: dict = GO_CONFIG) -> int:
    """Count the statements nested anywhere below node.

    node itself is not counted, so passing a body block yields the number
    of statements inside its braces. Nested blocks, case clauses and the
    bodies of function literals all count, as they do in go/ast.
    """
    if node is None:
        return 0
    statement_types = config["statement_types"]
    implicit = config["implicit_statements"]
    labeled_type = config["labeled_type"]
    total = 0

    def counter(n) -> bool:
        nonlocal total
        if n.type in statement_types:
            total += 1 + implicit.get(n.type, 0)
        # go/ast gives a label closing a block an EmptyStmt to label.
        if n.type == labeled_type and not any(c.type in statement_types for c in n.named_children):
            total += 1
        return True

    for child in node.named_children:
        walk_tree(child, counter)
    return total


def block_statements(block, config: dict = GO_CONFIG) -> list:
    """Return the direct statements of a block, skipping comments."""
    if block is None:
        return []
    statement_types = config["statement_types"]
    statements = []
    for child in block.named_children:
        if child.type == config["statement_list_type"]:
            statements.extend(c for c in child.named_children if c.type in statement_types)
        elif child.type in statement_types:
            statements.append(child)
    return statements


def count_fields(field_list, config: dict = GO_CONFIG) -> int:
    """Return the arity of a parameter or result list.

    Each declaration counts its identifiers, or 1 when it has none
    ("a, b int" is 2, "(int, error)" is 2). A bare result type such as
    "error" is 1; a missing list is 0.
    """
    if field_list is None:
        return 0
    if field_list.type != "parameter_list":
        return 1
    total = 0
    for decl in field_list.named_children:
        if decl.type not in config["parameter_types"]:
            continue
        total += max(1, len(decl.children_by_field_name("name")))
    return total


def bool_param_count(field_list, config: dict = GO_CONFIG) -> int:
    """Count parameters whose declared type is exactly the bool identifier."""
    if field_list is None:
        return 0
    total = 0
    for decl in field_list.named_children:
        if decl.type != "parameter_declaration":
            continue
        type_node = decl.child_by_field_name("type")
        if type_node is None or type_node.type != "type_identifier":
            continue
        if type_node.text.decode("utf8", errors="replace") != config["bool_type"]:
            continue
        total += max(1, len(decl.children_by_field_name("name")))
    return total


def chain_length(if_node, config: dict = GO_CONFIG) -> int:
    """Number of else links hanging off an if statement.

    0 without an else, 1 for a plain else, one more for every else-if.
    """
    length = 0
    current = if_node
    while True:
        alternative = current.child_by_field_name("alternative")
        if alternative is None:
            return length
        length += 1
        if alternative.type != config["if_type"]:
            return length
        current = alternative


def get_function_name(node) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return "<anonymous>"
    return name_node.text.decode("utf8", errors="replace")


def find_functions(root_node, config: dict = GO_CONFIG) -> list:
    """Return the top-level function and method declarations, in order."""
    return [n for n in root_node.named_children if n.type in config["function_types"]]


# ---------------------------------------------------------------------------
# Function examiner
# ---------------------------------------------------------------------------


def _check_if_bodies(body, name: str, filename: str, thresholds: Thresholds, report: Report, config: dict) -> None:
    if_type = config["if_type"]

    def visit(n) -> bool:
        if n.type != if_type:
            return True
        consequence = n.child_by_field_name("consequence")
        position = position_of(n, filename)
        if not block_statements(consequence, config):
            report.add_empty_if_body(Finding(filename, name, Category.EMPTY_IF_BODY, 0, position))
            return True
        count = statement_count(consequence, config)
        if count > thresholds.if_body:
            report.add_long_if_body(Finding(filename, name, Category.LONG_IF_BODY, count, position))
        return True

    walk_tree(body, visit)


def _check_if_chains(body, name: str, filename: str, thresholds: Thresholds, report: Report, config: dict) -> None:
    if_type = config["if_type"]

    def visit(n) -> bool:
        if n.type != if_type:
            return True
        length = chain_length(n, config)
        if length > thresholds.if_chain:
            report.add_if_chain(
                Finding(filename, name, Category.LONG_IF_CHAIN, length, position_of(n, filename))
            )
        # The chain rooted here covers everything beneath it.
        return False

    walk_tree(body, visit)


def examine_function(
    func_node, filename: str, thresholds: Thresholds, report: Report, config: dict = GO_CONFIG
) -> None:
    """Run every check against one function or method declaration.

    Checks run in a fixed order so output is deterministic: statement
    count, parameter count, bool parameters, result count, if bodies,
    if/else chains.
    """
    name = get_function_name(func_node)
    position = position_of(func_node, filename)
    body = func_node.child_by_field_name("body")
    params = func_node.child_by_field_name("parameters")

    num_statements = statement_count(body, config)
    if num_statements > thresholds.statements:
        report.add_statement(Finding(filename, name, Category.TOO_MANY_STATEMENTS, num_statements, position))

    num_params = count_fields(params, config)
    if num_params > thresholds.params:
        report.add_param(Finding(filename, name, Category.TOO_MANY_PARAMS, num_params, position))

    if thresholds.check_bool_params:
        for _ in range(bool_param_count(params, config)):
            report.add_bool_param(Finding(filename, name, Category.BOOLEAN_PARAM, 0, position))

    num_results = count_fields(func_node.child_by_field_name("result"), config)
    if num_results > thresholds.results:
        report.add_result(Finding(filename, name, Category.TOO_MANY_RESULTS, num_results, position))

    if body is None:
        return
    _check_if_bodies(body, name, filename, thresholds, report, config)
    _check_if_chains(body, name, filename, thresholds, report, config)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

_parser_cache: dict = {}


def _get_parser(config: dict) -> Parser | None:
    """Get or create a tree-sitter parser for a language config.

    Returns None if the grammar package is not installed.
    """
    cache_key = (config["grammar_module"], config["language_func"])
    if cache_key in _parser_cache:
        return _parser_cache[cache_key]
    try:
        mod = importlib.import_module(config["grammar_module"])
        lang_func = getattr(mod, config["language_func"])
        parser = Parser(Language(lang_func()))
    except (ImportError, AttributeError, TypeError, OSError):
        parser = None
    _parser_cache[cache_key] = parser
    return parser


def find_syntax_error(root_node):
    """Return the first ERROR or missing node in document order, or None."""
    if not root_node.has_error:
        return None
    stack = [root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return root_node


def parse_source(source: str | bytes, filename: str = "<unknown>", config: dict = GO_CONFIG):
    """Parse source into a tree-sitter root node.

    Raises ParseError when the grammar is unavailable or the source does
    not parse cleanly.
    """
    parser = _get_parser(config)
    if parser is None:
        raise ParseError(f"tree-sitter grammar {config['grammar_module']!r} is not installed")

    data = source.encode("utf8") if isinstance(source, str) else source
    try:
        tree = parser.parse(data)
    except (ValueError, TypeError) as exc:
        raise ParseError(str(exc)) from exc

    root = tree.root_node
    bad = find_syntax_error(root)
    if bad is not None:
        what = f"missing {bad.type}" if bad.is_missing else "syntax error"
        raise ParseError(f"{position_of(bad, filename)}: {what}")

    # tree-sitter-go accepts a file without a package clause; Go does not.
    first = next((n for n in root.named_children if n.type != "comment"), None)
    if first is None or first.type != config["package_type"]:
        where = position_of(first if first is not None else root, filename)
        found = _first_token(first).type if first is not None else "EOF"
        raise ParseError(f"{where}: expected 'package', found '{found}'")
    return root


def _first_token(node):
    while node.child_count:
        node = node.children[0]
    return node


# ---------------------------------------------------------------------------
# File walker
# ---------------------------------------------------------------------------


def analyze_source(
    source: str | bytes,
    thresholds: Thresholds,
    report: Report,
    filename: str = "<unknown>",
    config: dict = GO_CONFIG,
) -> None:
    """Parse one file's source and record findings for each function in it."""
    root = parse_source(source, filename, config)
    for func_node in find_functions(root, config):
        examine_function(func_node, filename, thresholds, report, config)


def analyze_file(path: str, thresholds: Thresholds, report: Report, config: dict = GO_CONFIG) -> None:
    """Read and analyze one file. Raises ParseError if it can't be read or parsed."""
    try:
        with open(path, "rb") as f:
            source = f.read()
    except OSError as exc:
        raise ParseError(exc.strerror or str(exc)) from exc
    analyze_source(source, thresholds, report, path, config)


# ---------------------------------------------------------------------------
# File integration
# ---------------------------------------------------------------------------


def check_pattern(pattern: str) -> None:
    """Raise ValueError if pattern is malformed.

    Rejects an unterminated character class (including "[]") and a
    trailing backslash, the cases path.Match reports as bad patterns.
    """
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 == n:
                raise ValueError(f"syntax error in pattern {pattern!r}: trailing backslash")
            i += 2
            continue
        if c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            # A ']' right after the opening bracket is part of the class.
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError(f"syntax error in pattern {pattern!r}: unterminated '['")
            i = j + 1
            continue
        i += 1


def is_test_file(filepath: str, pattern: str) -> bool:
    """Whether a file's base name matches the test-file pattern.

    A malformed pattern is logged and treated as no match.
    """
    try:
        check_pattern(pattern)
    except ValueError as exc:
        log(f"match error: {exc}", style="red")
        return False
    return fnmatch.fnmatchcase(os.path.basename(filepath), pattern)


def collect_go_files(paths: list[str], config: dict = GO_CONFIG) -> list[str]:
    """Expand directories into the source files below them.

    Files named directly are kept as given, in input order. Directories
    contribute their matching files recursively in sorted order.
    """
    extensions = config["file_extensions"]
    result = []
    for path in paths:
        if not os.path.isdir(path):
            result.append(path)
            continue
        found = []
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames.sort()
            for name in filenames:
                if os.path.splitext(name)[1] in extensions:
                    found.append(os.path.join(dirpath, name))
        result.extend(sorted(found))
    return result


def run_analysis(paths: list[str], thresholds: Thresholds, report: Report, config: dict = GO_CONFIG) -> int:
    """Analyze each path in order, recording findings on report.

    Test files are skipped when the thresholds say so. A file that fails to
    parse is logged and contributes nothing; the run carries on. Returns
    the number of files analyzed successfully.
    """
    analyzed = 0
    for filepath in collect_go_files(paths, config):
        if thresholds.ignore_test_files and is_test_file(filepath, thresholds.test_file_pattern):
            continue
        try:
            analyze_file(filepath, thresholds, report, config)
        except ParseError as exc:
            log(f"error parsing {filepath}: {exc}", style="red")
            continue
        analyzed += 1
    return analyzed
