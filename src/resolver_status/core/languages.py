from collections.abc import Iterable
from pathlib import Path

_LANGUAGE_ALIASES = {
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "tsx",
    "typescript": "typescript",
}

_EXTENSION_LANGUAGE_MAP = {
    ".cjs": "javascript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cts": "typescript",
    ".mts": "typescript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

DEFAULT_SOURCE_EXTENSIONS = (".ts",)

_SUPPORTED_LANGUAGES = set(_EXTENSION_LANGUAGE_MAP.values())


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


def source_extensions(extensions: Iterable[str] | None = None) -> tuple[str, ...]:
    """Normalize user supplied extensions to lowercase, dot-prefixed and parseable."""
    if not extensions:
        return DEFAULT_SOURCE_EXTENSIONS
    normalized: list[str] = []
    for ext in extensions:
        value = ext.strip().lower()
        if not value.startswith("."):
            value = f".{value}"
        if value not in _EXTENSION_LANGUAGE_MAP:
            raise ValueError(f"Unsupported file extension: {value}")
        if value not in normalized:
            normalized.append(value)
    return tuple(normalized)
