from pathlib import Path

_LANGUAGE_ALIASES = {
    "go": "go",
    "golang": "go",
    "python": "python",
    "py": "python",
    "rs": "rust",
    "rust": "rust",
}

_EXTENSION_LANGUAGE_MAP = {
    ".go": "go",
    ".py": "python",
    ".pyi": "python",
    ".rs": "rust",
}

# Node types that can appear directly under the root node and declare a named item.
_DECLARATION_TYPES = {
    "rust": frozenset(
        {
            "const_item",
            "enum_item",
            "function_item",
            "impl_item",
            "macro_definition",
            "mod_item",
            "static_item",
            "struct_item",
            "trait_item",
            "type_item",
            "union_item",
        }
    ),
    "go": frozenset({"function_declaration", "method_declaration", "type_declaration"}),
    "python": frozenset({"class_definition", "decorated_definition", "function_definition"}),
}

# Sibling node types that may be attached to the declaration that follows them.
_LEADING_TRIVIA_TYPES = {
    "rust": frozenset({"attribute_item", "line_comment", "block_comment"}),
    "go": frozenset({"comment"}),
    "python": frozenset({"comment"}),
}

_SUPPORTED_LANGUAGES = set(_DECLARATION_TYPES)


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise ValueError(f"Unsupported file extension: {suffix}")


def resolve_language(language: str | None, file_path: Path | None) -> str:
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    raise ValueError("Language must be provided when no file path is available.")


def declaration_types(language: str) -> frozenset[str]:
    return _DECLARATION_TYPES[normalize_language(language)]


def leading_trivia_types(language: str) -> frozenset[str]:
    return _LEADING_TRIVIA_TYPES[normalize_language(language)]
