"""Structured view over a nuxt.config.ts document.

The document has a small, predictable grammar: import lines followed by a
single ``defineNuxtConfig({...})`` call holding flat keys, nested blocks and
the ``modules`` array. Rather than parsing TypeScript, this module scans the
text once to mark string literals and comments, then locates delimiters
only in the remaining code. Every offset stored on the document refers to
``raw_text``; patches are text splices followed by a fresh parse.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from .constants import CONFIG_FACTORY_CALL, CONFIG_MODULES_KEY
from .errors import PatchError

_FACTORY_OPEN_RE = re.compile(rf"{CONFIG_FACTORY_CALL}\s*\(\s*\{{")
_IMPORT_RE = re.compile(r"""\bimport\b\s*(?:[^'"`;]*?\bfrom\s*)?(['"])(?P<spec>[^'"\n]+)\1""")
_ENTRY_KEY_RE = re.compile(r"""(['"]?)(?P<key>[A-Za-z_$][\w$-]*)\1\s*:\s*""")
_FIRST_STRING_RE = re.compile(r"""(['"])(?P<value>[^'"]*)\1""")

_QUOTES = "'\"`"
_OPENERS = {"[": "]", "{": "}", "(": ")"}
_CLOSERS = set(_OPENERS.values())


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string literal opening at start."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            break
        i += 1
    raise PatchError(f"unterminated string literal at offset {start}")


def _literal_spans(text: str) -> Iterator[tuple[int, int, bool]]:
    """Yield (start, end, is_comment) for every string literal and comment."""
    i = 0
    while i < len(text):
        if text.startswith("//", i):
            end = text.find("\n", i)
            end = len(text) if end == -1 else end
            yield i, end, True
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise PatchError(f"unterminated block comment at offset {i}")
            end += 2
            yield i, end, True
        elif text[i] in _QUOTES:
            end = _string_end(text, i)
            yield i, end, False
        else:
            i += 1
            continue
        i = end


def literal_mask(text: str) -> list[bool]:
    """
    Mark every character that belongs to a string literal or a comment.

    Args:
        text: Document text

    Returns:
        List with one flag per character, True inside literals/comments

    Raises:
        PatchError: On an unterminated string or block comment
    """
    mask = [False] * len(text)
    for start, end, _ in _literal_spans(text):
        for j in range(start, end):
            mask[j] = True
    return mask


def strip_comments(fragment: str) -> str:
    """Remove comments from a code fragment, keeping string literals intact."""
    parts: list[str] = []
    last = 0
    for start, end, is_comment in _literal_spans(fragment):
        if is_comment:
            parts.append(fragment[last:start])
            last = end
    parts.append(fragment[last:])
    return "".join(parts)


def find_closing(text: str, mask: list[bool], open_index: int) -> int:
    """
    Find the delimiter closing the one at open_index.

    Args:
        text: Document text
        mask: Literal mask from literal_mask()
        open_index: Index of an opening bracket, brace or parenthesis

    Returns:
        Index of the matching closing delimiter

    Raises:
        PatchError: If the delimiters are unbalanced
    """
    expected = [_OPENERS[text[open_index]]]
    for i in range(open_index + 1, len(text)):
        if mask[i]:
            continue
        ch = text[i]
        if ch in _OPENERS:
            expected.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if ch != expected[-1]:
                raise PatchError(f"unbalanced delimiters: unexpected '{ch}' at offset {i}")
            expected.pop()
            if not expected:
                return i
    raise PatchError(f"unbalanced delimiters: '{text[open_index]}' at offset {open_index} is never closed")


def split_top_level(text: str, mask: list[bool], start: int, end: int) -> list[tuple[int, int]]:
    """
    Split text[start:end] at commas that are not nested in any delimiter.

    Returns:
        (start, end) offsets of each non-blank segment
    """
    segments: list[tuple[int, int]] = []
    depth = 0
    seg_start = start
    for i in range(start, end):
        if mask[i]:
            continue
        ch = text[i]
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == "," and depth == 0:
            segments.append((seg_start, i))
            seg_start = i + 1
    segments.append((seg_start, end))
    return [(s, e) for s, e in segments if text[s:e].strip()]


def _search_code(pattern: re.Pattern[str], text: str, mask: list[bool], start: int, end: int):
    """Return the first match of pattern that starts outside literals/comments."""
    for match in pattern.finditer(text, start, end):
        if not mask[match.start()]:
            return match
    return None


def _first_code_index(text: str, mask: list[bool], start: int, end: int) -> int:
    """Skip whitespace and comments; return the first code offset in the range."""
    for i in range(start, end):
        if not mask[i] and not text[i].isspace():
            return i
    return end


def unquote(token: str) -> str | None:
    """Return the contents of a single- or double-quoted token, else None."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"":
        return token[1:-1]
    return None


@dataclass(frozen=True)
class ModuleToken:
    """One entry of the modules array.

    Attributes:
        name: Module identifier used for presence checks
        raw: Original entry text, kept for non-string entries
        literal: True when the entry is a quoted module name
    """

    name: str
    raw: str
    literal: bool = True

    @classmethod
    def from_text(cls, text: str) -> "ModuleToken":
        token = text.strip()
        value = unquote(token)
        if value is not None:
            return cls(name=value, raw=token)
        if token[:1] in _OPENERS:
            # Tuple form: ['@nuxtjs/i18n', { ... }]
            first = _FIRST_STRING_RE.search(token)
            return cls(name=first.group("value") if first else token, raw=token, literal=False)
        return cls(name=token, raw=token, literal=False)

    def render(self) -> str:
        """Serialize with the document's single quoting style."""
        if self.literal:
            return f"'{self.name}'"
        return self.raw


@dataclass(frozen=True)
class ModulesSpan:
    """Offsets of the modules array within the document."""

    key_start: int
    open_bracket: int
    close_bracket: int


@dataclass(frozen=True)
class ConfigurationDocument:
    """Parsed view over one nuxt.config.ts text.

    Attributes:
        raw_text: The full document text
        imports: Distinct import specifiers, in document order
        module_tokens: Entries of the modules array, in document order
        key_blocks: Top-level keys of the factory call whose value is a block
        factory_open: Offset of the factory call's opening brace
        factory_close: Offset of the factory call's closing brace
        modules_span: Offsets of the modules array, None when absent
    """

    raw_text: str
    imports: tuple[str, ...]
    module_tokens: tuple[ModuleToken, ...]
    key_blocks: dict[str, str] = field(hash=False)
    factory_open: int
    factory_close: int
    modules_span: ModulesSpan | None

    @property
    def module_list(self) -> tuple[str, ...]:
        """Module names registered in the modules array."""
        return tuple(token.name for token in self.module_tokens)

    def has_key(self, key_name: str) -> bool:
        """
        Check whether ``key_name:`` appears anywhere in the document.

        The check is textual and unscoped: it also matches
        nested keys and commented-out keys.
        """
        pattern = rf"""(?<![\w$-])(['"]?){re.escape(key_name)}\1\s*:"""
        return re.search(pattern, self.raw_text) is not None

    @classmethod
    def parse(cls, text: str) -> "ConfigurationDocument":
        """
        Parse document text.

        Args:
            text: Full nuxt.config.ts contents

        Returns:
            ConfigurationDocument for the text

        Raises:
            PatchError: If the factory call is missing or delimiters are unbalanced
        """
        mask = literal_mask(text)

        opener = _search_code(_FACTORY_OPEN_RE, text, mask, 0, len(text))
        if opener is None:
            raise PatchError(f"missing '{CONFIG_FACTORY_CALL}({{' factory call opening")
        factory_open = opener.end() - 1
        factory_close = find_closing(text, mask, factory_open)

        imports: list[str] = []
        # Import statements may span lines; only matches starting in code count
        for match in _IMPORT_RE.finditer(text, 0, opener.start()):
            if not mask[match.start()] and match.group("spec") not in imports:
                imports.append(match.group("spec"))

        modules_span = None
        key_blocks: dict[str, str] = {}
        for start, end in split_top_level(text, mask, factory_open + 1, factory_close):
            code_start = _first_code_index(text, mask, start, end)
            entry = _ENTRY_KEY_RE.match(text, code_start, end)
            if entry is None:
                continue
            key = entry.group("key")
            value_start = entry.end()
            if key == CONFIG_MODULES_KEY and modules_span is None and text.startswith("[", value_start):
                close_bracket = find_closing(text, mask, value_start)
                modules_span = ModulesSpan(code_start, value_start, close_bracket)
            elif text.startswith("{", value_start):
                key_blocks.setdefault(key, text[value_start:end].strip())

        module_tokens: list[ModuleToken] = []
        if modules_span is not None:
            seen: set[str] = set()
            bounds = (modules_span.open_bracket + 1, modules_span.close_bracket)
            for start, end in split_top_level(text, mask, *bounds):
                entry_text = strip_comments(text[start:end])
                if not entry_text.strip():
                    continue
                token = ModuleToken.from_text(entry_text)
                if token.name not in seen:
                    seen.add(token.name)
                    module_tokens.append(token)

        return cls(
            raw_text=text,
            imports=tuple(imports),
            module_tokens=tuple(module_tokens),
            key_blocks=key_blocks,
            factory_open=factory_open,
            factory_close=factory_close,
            modules_span=modules_span,
        )
