# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Editor language ids -> runtime languages the backend understands."""

PLAINTEXT = "plaintext"

SUPPORTED_LANGUAGES: frozenset[str] = frozenset({"python", "java", "javascript"})

# Editor ids that share a runtime with a supported language.
_ALIASES: dict[str, str] = {
    "javascriptreact": "javascript",
    "jsx": "javascript",
}


def convert_language(language_id: str | None) -> str:
    """Normalize an editor language id. Unsupported ids become PLAINTEXT."""
    if not language_id:
        return PLAINTEXT
    lang = language_id.lower()
    lang = _ALIASES.get(lang, lang)
    return lang if lang in SUPPORTED_LANGUAGES else PLAINTEXT


def is_supported(language_id: str | None) -> bool:
    return convert_language(language_id) != PLAINTEXT
