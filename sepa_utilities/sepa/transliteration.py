"""
SEPA Character Transliteration

SEPA files only accept the Latin character set
a-z A-Z 0-9 / - ? : ( ) . , ' + and space. This module maps extended
characters (Latin-extended, Greek, Cyrillic and some symbols) onto that set
following the EPC best practice for the Unicode subset, and replaces anything
that has no mapping with a dot.

Reference: EPC217-08 SEPA Requirements for an Extended Character Set
"""

import re
from enum import IntFlag

from .constants import TEXT_LENGTH_SHORT


class SanitizeFlags(IntFlag):
    """Alternate transliteration behaviour, combinable with |."""
    NONE = 0
    ALT_REPLACEMENT_GERMAN = 1          # Ä -> Ae instead of Ä -> A
    NO_REPLACEMENT_GERMAN = 1 << 15     # keep ÄäÖöÜüß untouched


GERMAN_CHARS = "ÄäÖöÜüß"

ALT_GERMAN_REPLACEMENT = {
    "Ä": "Ae", "ä": "ae", "Ö": "Oe", "ö": "oe", "Ü": "Ue", "ü": "ue", "ß": "ss",
}

SPECIAL_CHARS_REPLACEMENT = {
    ";": ",", "[": "(", "\\": "/", "]": ")", "^": ".", "_": "-", "`": "'", "{": "(",
    "|": "/", "}": ")", "~": "-", "¿": "?", "À": "A", "Á": "A", "Â": "A", "Ã": "A",
    "Ä": "A", "Å": "A", "Æ": "A", "Ç": "C", "È": "E", "É": "E", "Ê": "E", "Ë": "E",
    "Ì": "I", "Í": "I", "Î": "I", "Ï": "I", "Ð": "D", "Ñ": "N", "Ò": "O", "Ó": "O",
    "Ô": "O", "Õ": "O", "Ö": "O", "Ø": "O", "Ù": "U", "Ú": "U", "Û": "U", "Ü": "U",
    "Ý": "Y", "Þ": "T", "ß": "s", "à": "a", "á": "a", "â": "a", "ã": "a", "ä": "a",
    "å": "a", "æ": "a", "ç": "c", "è": "e", "é": "e", "ê": "e", "ë": "e", "ì": "i",
    "í": "i", "î": "i", "ï": "i", "ð": "d", "ñ": "n", "ò": "o", "ó": "o", "ô": "o",
    "õ": "o", "ö": "o", "ø": "o", "ù": "u", "ú": "u", "û": "u", "ü": "u", "ý": "y",
    "þ": "t", "ÿ": "y", "Ā": "A", "ā": "a", "Ă": "A", "ă": "a", "Ą": "A", "ą": "a",
    "Ć": "C", "ć": "c", "Ĉ": "C", "ĉ": "c", "Ċ": "C", "ċ": "c", "Č": "C", "č": "c",
    "Ď": "D", "ď": "d", "Đ": "D", "đ": "d", "Ē": "E", "ē": "e", "Ĕ": "E", "ĕ": "e",
    "Ė": "E", "ė": "e", "Ę": "E", "ę": "e", "Ě": "E", "ě": "e", "Ĝ": "G", "ĝ": "g",
    "Ğ": "G", "ğ": "g", "Ġ": "G", "ġ": "g", "Ģ": "G", "ģ": "g", "Ĥ": "H", "ĥ": "h",
    "Ħ": "H", "ħ": "h", "Ĩ": "I", "ĩ": "i", "Ī": "I", "ī": "i", "Ĭ": "I", "ĭ": "i",
    "Į": "I", "į": "i", "İ": "I", "ı": "i", "Ĳ": "I", "ĳ": "i", "Ĵ": "J", "ĵ": "j",
    "Ķ": "K", "ķ": "k", "ĸ": ".", "Ĺ": "L", "ĺ": "l", "Ļ": "L", "ļ": "l", "Ľ": "L",
    "ľ": "l", "Ŀ": "L", "ŀ": "l", "Ł": "L", "ł": "l", "Ń": "N", "ń": "n", "Ņ": "N",
    "ņ": "n", "Ň": "N", "ň": "n", "Ő": "O", "ő": "o", "Œ": "O", "œ": "o", "Ŕ": "R",
    "ŕ": "r", "Ŗ": "R", "ŗ": "r", "Ř": "R", "ř": "r", "Ś": "S", "ś": "s", "Ŝ": "S",
    "ŝ": "s", "Ş": "S", "ş": "s", "Š": "S", "š": "s", "Ţ": "T", "ţ": "t", "Ť": "T",
    "ť": "t", "Ŧ": "T", "ŧ": "t", "Ũ": "U", "ũ": "u", "Ū": "U", "ū": "u", "Ŭ": "U",
    "ŭ": "u", "Ů": "U", "ů": "u", "Ű": "U", "ű": "u", "Ų": "U", "ų": "u", "Ŵ": "W",
    "ŵ": "w", "Ŷ": "Y", "ŷ": "y", "Ÿ": "Y", "Ź": "Z", "ź": "z", "Ż": "Z", "ż": "z",
    "Ž": "Z", "ž": "z", "Ș": "S", "ș": "s", "Ț": "T", "ț": "t", "Ά": "A", "Έ": "E",
    "Ή": "I", "Ί": "I", "Ό": "O", "Ύ": "Y", "Ώ": "O", "ΐ": "i", "Α": "A", "Β": "V",
    "Γ": "G", "Δ": "D", "Ε": "E", "Ζ": "Z", "Η": "I", "Θ": "TH", "Ι": "I", "Κ": "K",
    "Λ": "L", "Μ": "M", "Ν": "N", "Ξ": "X", "Ο": "O", "Π": "P", "Ρ": "R", "Σ": "S",
    "Τ": "T", "Υ": "Y", "Φ": "F", "Χ": "CH", "Ψ": "PS", "Ω": "O", "Ϊ": "I", "Ϋ": "Y",
    "ά": "a", "έ": "e", "ή": "i", "ί": "i", "ΰ": "y", "α": "a", "β": "v", "γ": "g",
    "δ": "d", "ε": "e", "ζ": "z", "η": "i", "θ": "th", "ι": "i", "κ": "k", "λ": "l",
    "μ": "m", "ν": "n", "ξ": "x", "ο": "o", "π": "p", "ρ": "r", "ς": "s", "σ": "s",
    "τ": "t", "υ": "y", "φ": "f", "χ": "ch", "ψ": "ps", "ω": "o", "ϊ": "i", "ϋ": "y",
    "ό": "o", "ύ": "y", "ώ": "o", "А": "A", "Б": "B", "В": "V", "Г": "G", "Д": "D",
    "Е": "E", "Ж": "ZH", "З": "Z", "И": "I", "Й": "Y", "К": "K", "Л": "L", "М": "M",
    "Н": "N", "О": "O", "П": "P", "Р": "R", "С": "S", "Т": "T", "У": "U", "Ф": "F",
    "Х": "H", "Ц": "TS", "Ч": "CH", "Ш": "SH", "Щ": "SHT", "Ъ": "A", "Ь": "Y", "Ю": "YU",
    "Я": "YA", "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ж": "zh",
    "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o",
    "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "h", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "sht", "ъ": "a", "ь": "y", "ю": "yu", "я": "ya", "€": "E",

}

REMOVED_CHARS = str.maketrans("", "", "\"&<>")
WHITESPACE_RUN = re.compile(r"\s+")


def _build_table(replacement: dict[str, str]) -> dict[int, str]:
    return {ord(char): target for char, target in replacement.items()}


def _disallowed_pattern(exceptions: str = "") -> re.Pattern:
    return re.compile(r"[^a-zA-Z0-9/\-?:().,'+ " + re.escape(exceptions) + "]")


# Precomputed per flag combination, never mutated
_DEFAULT_TABLE = _build_table(SPECIAL_CHARS_REPLACEMENT)
_ALT_GERMAN_TABLE = _build_table({**SPECIAL_CHARS_REPLACEMENT, **ALT_GERMAN_REPLACEMENT})
_NO_GERMAN_TABLE = _build_table({
    char: target for char, target in SPECIAL_CHARS_REPLACEMENT.items()
    if char not in GERMAN_CHARS
})

_DISALLOWED = _disallowed_pattern()
_DISALLOWED_KEEP_GERMAN = _disallowed_pattern(GERMAN_CHARS)


def _rules_for(flags: int) -> tuple[dict[int, str], re.Pattern]:
    """Select the substitution table and allowed set for a flag combination."""
    if flags & SanitizeFlags.NO_REPLACEMENT_GERMAN:
        return _NO_GERMAN_TABLE, _DISALLOWED_KEEP_GERMAN
    if flags & SanitizeFlags.ALT_REPLACEMENT_GERMAN:
        return _ALT_GERMAN_TABLE, _DISALLOWED
    return _DEFAULT_TABLE, _DISALLOWED


def replace_special_chars(value: str, flags: int = SanitizeFlags.NONE) -> str:
    """
    Transliterate a string into the SEPA character set.

    1. Remove " & < > outright.
    2. Collapse whitespace runs into one space.
    3. Substitute extended characters (Θ -> TH, Щ -> SHT, ...).
    4. Replace every remaining disallowed character with '.'.
    5. Strip leading and trailing spaces.

    Args:
        value: Raw text.
        flags: SanitizeFlags. NO_REPLACEMENT_GERMAN wins over
               ALT_REPLACEMENT_GERMAN when both are set.

    Returns:
        Text containing only SEPA characters (plus German umlauts and ß when
        NO_REPLACEMENT_GERMAN is set).
    """
    table, disallowed = _rules_for(flags)

    value = value.translate(REMOVED_CHARS)
    value = WHITESPACE_RUN.sub(" ", value)
    value = value.translate(table)
    value = disallowed.sub(".", value)

    return value.strip(" ")


def sanitize_length(value: str, max_length: int) -> str:
    """Shorten the input to max_length characters."""
    return value[:max_length]


def sanitize_text(
    value: str,
    max_length: int = TEXT_LENGTH_SHORT,
    allow_empty: bool = False,
    flags: int = SanitizeFlags.NONE,
):
    """
    Transliterate and truncate a free text field.

    Returns the sanitized string, or None when the result is empty and the
    field does not allow empty values.
    """
    result = sanitize_length(replace_special_chars(value, flags), max_length)
    if result or allow_empty:
        return result
    return None
