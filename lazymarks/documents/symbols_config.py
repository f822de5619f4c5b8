"""Language/grammar configuration for enclosing-construct probing."""

from __future__ import annotations

import re

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".pyw": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".rb": "ruby",
    ".php": "php",
    ".kt": "kotlin",
    ".scala": "scala",
    ".lua": "lua",
    ".sh": "bash",
    ".bash": "bash",
}

FUNCTION_NODE_TYPES = {
    "function_definition",
    "function_declaration",
    "function_item",
    "method_definition",
    "method_declaration",
    "method",
}
CLASS_NODE_TYPES = {
    "class_definition",
    "class_declaration",
    "class_specifier",
    "struct_item",
    "enum_item",
    "trait_item",
    "class",
    "module",
}
DECORATED_NODE_TYPES = {"decorated_definition", "decorated_declaration"}
IDENTIFIER_NODE_TYPES = {
    "identifier",
    "type_identifier",
    "property_identifier",
    "field_identifier",
    "constant",
}

MISSING_PARSER_ERROR = (
    "Tree-sitter parser package not found. Install tree-sitter-languages or tree-sitter-language-pack."
)
SYMBOL_SPAN_CACHE_MAX = 128

# Lines opening with a closing bracket still belong to the construct above them.
CLOSING_LINE_PREFIXES = (")", "]", "}")

_JS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("class", re.compile(r"^\s*(?:export\s+)?(?:default\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("fn", re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\*?\s+(?P<name>[A-Za-z_$][\w$]*)")),
    (
        "fn",
        re.compile(r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"),
    ),
)

FALLBACK_PATTERNS_BY_LANGUAGE: dict[str, tuple[tuple[str, re.Pattern[str]], ...]] = {
    "python": (
        ("class", re.compile(r"^\s*class\s+(?P<name>[A-Za-z_]\w*)")),
        ("fn", re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)")),
    ),
    "javascript": _JS_PATTERNS,
    "typescript": _JS_PATTERNS,
    "tsx": _JS_PATTERNS,
    "go": (
        ("class", re.compile(r"^\s*type\s+(?P<name>[A-Za-z_]\w*)\s+(?:struct|interface)\b")),
        ("fn", re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*\(")),
    ),
    "rust": (
        ("class", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:struct|enum|trait|impl)\s+(?P<name>[A-Za-z_]\w*)")),
        ("fn", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(?P<name>[A-Za-z_]\w*)")),
    ),
    "ruby": (
        ("class", re.compile(r"^\s*(?:class|module)\s+(?P<name>[A-Za-z_][\w:]*)")),
        ("fn", re.compile(r"^\s*def\s+(?:self\.)?(?P<name>[A-Za-z_][\w!?=]*)")),
    ),
    "lua": (("fn", re.compile(r"^\s*(?:local\s+)?function\s+(?P<name>[A-Za-z_][\w.:]*)")),),
    "bash": (
        ("fn", re.compile(r"^\s*(?P<name>[A-Za-z_]\w*)\s*\(\)\s*\{")),
        ("fn", re.compile(r"^\s*function\s+(?P<name>[A-Za-z_]\w*)\b")),
    ),
}

GENERIC_FALLBACK_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("class", re.compile(r"^\s*(?:(?:public|private|protected|final|abstract|open|data|case)\s+)*class\s+(?P<name>[A-Za-z_]\w*)")),
    ("fn", re.compile(r"^\s*(?:(?:public|private|protected|static|final|abstract)\s+)*function\s+(?P<name>[A-Za-z_]\w*)")),
    ("fn", re.compile(r"^\s*(?:(?:private|override|suspend|inline)\s+)*(?:fun|def)\s+(?P<name>[A-Za-z_]\w*)")),
)
