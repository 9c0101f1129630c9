# reader/content/languages.py
"""
Code language names and a low-confidence content heuristic.

The guess is only a default for the code block language picker; it is never
treated as authoritative.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Iterable, List, Optional, Tuple

PLAIN_TEXT = "text"

SUPPORTED_LANGUAGES = frozenset(
    {
        "bash",
        "css",
        "cpp",
        "go",
        "html",
        "java",
        "javascript",
        "json",
        "jsx",
        "kotlin",
        "markdown",
        "python",
        "rust",
        "shellscript",
        "sql",
        "swift",
        "toml",
        "tsx",
        "typescript",
        "xml",
        "yaml",
    }
)

# Order shown in the language picker
CODE_LANGUAGE_OPTIONS = [
    "text",
    "javascript",
    "typescript",
    "tsx",
    "jsx",
    "json",
    "go",
    "cpp",
    "html",
    "css",
    "bash",
    "python",
    "rust",
    "java",
    "kotlin",
    "swift",
    "sql",
    "yaml",
    "toml",
    "markdown",
]

LANGUAGE_ALIASES = {
    "cjs": "javascript",
    "c++": "cpp",
    "js": "javascript",
    "jsonc": "json",
    "json5": "json",
    "kt": "kotlin",
    "plaintext": "text",
    "md": "markdown",
    "mts": "typescript",
    "plain": "text",
    "py": "python",
    "rs": "rust",
    "sh": "bash",
    "shell": "bash",
    "ts": "typescript",
    "yml": "yaml",
    "zsh": "bash",
}

_LANGUAGE_PREFIX_RE = re.compile(r"^language-")
_LANG_PREFIX_RE = re.compile(r"^lang-")


def normalize_code_language(raw_language: Optional[str]) -> str:
    """Map a class token or user value ("language-py", "JS") to a supported name."""
    if not raw_language:
        return PLAIN_TEXT

    normalized = _LANGUAGE_PREFIX_RE.sub("", raw_language.strip().lower())
    normalized = _LANG_PREFIX_RE.sub("", normalized)
    resolved = LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved in SUPPORTED_LANGUAGES:
        return resolved
    return PLAIN_TEXT


def detect_code_language_from_class_tokens(tokens: Iterable[str]) -> str:
    for token in tokens:
        language = normalize_code_language(token)
        if language != PLAIN_TEXT:
            return language
    return PLAIN_TEXT


def format_code_for_language(code: str, language: str) -> str:
    """Pretty-print JSON payloads; everything else is returned untouched."""
    if language != "json":
        return code
    try:
        parsed = json.loads(code)
    except ValueError:
        return code
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant: {name}")


def _count(pattern: str, code: str, flags: int = re.M) -> int:
    return sum(1 for _ in re.finditer(pattern, code, flags))


def _search(pattern: str, code: str, flags: int = re.M) -> bool:
    return re.search(pattern, code, flags) is not None


def _looks_like_json(code: str) -> bool:
    if not re.match(r"[{\[]", code):
        return False
    try:
        json.loads(code, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


def _looks_like_rust(code: str) -> bool:
    return (
        _search(r"\b(use\s+\w|fn\s+\w+\s*\(|impl\s+\w+|pub\s+(struct|enum|fn)|let\s+mut\s+\w+)", code)
        or _search(r"\blet\s+mut\s+\w+\s*:\s*[^=;]+=\s*", code)
        or _search(r"\b[A-Za-z_][\w]*::[A-Za-z_][\w:]*", code)
    )


def _has_jsx(code: str) -> bool:
    if _search(r"<[A-Z][A-Za-z0-9]*(\s[^>]*)?>", code) or _search(r"<>[\s\S]*</>", code):
        return True
    returns_markup = _search(r"\b(return|=>)\b", code) or _search(r"\bReact\.createElement\b", code)
    has_element = _search(r"<([A-Za-z][\w.-]*)(\s[^>]*)?>", code) or _search(
        r"<([A-Za-z][\w.-]*)(\s[^>]*)?/>", code
    )
    return returns_markup and has_element


def _has_typescript(code: str) -> bool:
    return (
        _search(r"\b(interface|type)\s+\w+", code)
        or _search(r"\b(enum|implements|readonly)\b", code)
        or _search(r":\s*[A-Za-z_$][\w<>{}|,&? ]*(?=\s*[=),;])", code)
        or _search(r"\bas\s+[A-Za-z_$][\w<>{}|,&? ]*", code)
    )


def _looks_like_bash(code: str) -> bool:
    if _search(r"^#!.*\b(bash|sh|zsh)\b", code):
        return True
    return (
        _count(r"^\s*export\s+[A-Za-z_][A-Za-z0-9_]*=", code) >= 1
        or _count(r"^\s*(cd|ls|pwd|cat|grep|find|curl|wget|chmod|chown|sudo)\b", code) >= 2
    )


def _looks_like_html(code: str) -> bool:
    return _search(r"<[a-z][\w-]*(\s[^>]*)?>", code, re.I) and _search(r"</[a-z][\w-]*>", code, re.I)


def _looks_like_sql(code: str) -> bool:
    return _search(
        r"\b(select|insert\s+into|update|delete\s+from|create\s+table|alter\s+table|drop\s+table)\b",
        code,
        re.I,
    )


def _looks_like_toml(code: str) -> bool:
    return _search(r"^\s*\[[^\]]+\]\s*$", code) or _search(r"^\s*[\w.-]+\s*=\s*.+$", code)


def _looks_like_yaml(code: str) -> bool:
    if _search(r"^---\s*$", code):
        return True
    return (
        _count(r"^\s*[\w-]+\s*:\s*.+$", code) >= 2
        and not _search(r"[;{}()]", code)
        and not _search(r"\b(function|class|const|let|var)\b", code.lower())
    )


def _looks_like_go(code: str) -> bool:
    return _search(r"^\s*package\s+main\b", code) or _search(r"\bfunc\s+\w+\s*\([^)]*\)\s*\{", code)


def _looks_like_cpp(code: str) -> bool:
    return (
        _search(r"^\s*#include\s*[<\"]", code)
        or _search(r"\bstd::\w+", code)
        or _search(r"\bint\s+main\s*\(", code)
    )


def _looks_like_java(code: str) -> bool:
    return (
        _search(r"^\s*import\s+\w+(\.\w+)*;?", code)
        and _search(r"\b(class|interface|enum)\s+\w+", code)
        and _search(r"\bpublic\s+static\s+void\s+main\s*\(", code)
    )


def _looks_like_kotlin(code: str) -> bool:
    return _search(r"\bfun\s+main\s*\(", code) or _search(r"\b(data\s+class|val\s+\w+|var\s+\w+)\b", code)


def _looks_like_swift(code: str) -> bool:
    return _search(r"^\s*import\s+(Foundation|UIKit|SwiftUI)\b", code) or _search(
        r"\b(func|struct|enum|protocol)\s+\w+\b", code
    )


def _looks_like_python(code: str) -> bool:
    return _search(r"^\s*(from\s+\w+\s+import\s+|import\s+\w+)", code) or _search(
        r"^\s*(def|class)\s+\w+\s*\(?.*\)?:\s*$", code
    )


def _looks_like_markdown(code: str) -> bool:
    return _search(r"^```[\w-]*\s*$", code) or _search(r"^\s{0,3}#{1,6}\s+\S+", code)


def _looks_like_javascript(code: str) -> bool:
    return _search(r"\b(function|const|let|var|return|async|await|console\.log)\b", code) or "=>" in code


# Evaluated top to bottom; the first matching rule names the language.
CONTENT_RULES: List[Tuple[str, Callable[[str], bool]]] = [
    ("json", _looks_like_json),
    ("rust", _looks_like_rust),
    ("tsx", lambda code: _has_jsx(code) and _has_typescript(code)),
    ("jsx", _has_jsx),
    ("typescript", _has_typescript),
    ("bash", _looks_like_bash),
    ("xml", lambda code: _search(r"^\s*<\?xml\b", code)),
    ("html", _looks_like_html),
    ("css", lambda code: _search(r"(^|\n)\s*[\w.#:\[\]-]+\s*\{[^}]*:[^}]*\}", code)),
    ("sql", _looks_like_sql),
    ("toml", _looks_like_toml),
    ("yaml", _looks_like_yaml),
    ("go", _looks_like_go),
    ("cpp", _looks_like_cpp),
    ("java", _looks_like_java),
    ("kotlin", _looks_like_kotlin),
    ("swift", _looks_like_swift),
    ("python", _looks_like_python),
    ("markdown", _looks_like_markdown),
    ("javascript", _looks_like_javascript),
]


def detect_code_language_from_content(code: str) -> str:
    """
    Guess the language of a code snippet from its shape.

    Args:
        code: Raw code text

    Returns:
        A name from SUPPORTED_LANGUAGES, or "text" when no rule matches
    """
    trimmed = code.strip()
    if not trimmed:
        return PLAIN_TEXT

    for language, matches in CONTENT_RULES:
        if matches(trimmed):
            return language
    return PLAIN_TEXT
