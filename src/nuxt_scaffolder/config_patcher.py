"""Idempotent structural edits on nuxt.config.ts.

Every operation takes a parsed ConfigurationDocument and returns a new one.
Each is a no-op when applied to its own output.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from .config_document import ConfigurationDocument, ModuleToken
from .constants import CONFIG_FACTORY_CALL, CONFIG_MODULES_KEY
from .errors import FilesystemError, PatchError

logger = logging.getLogger(__name__)

Patch = Callable[[ConfigurationDocument], ConfigurationDocument]


def _splice(doc: ConfigurationDocument, start: int, end: int, replacement: str) -> ConfigurationDocument:
    """Replace raw_text[start:end] and re-parse the result."""
    text = doc.raw_text[:start] + replacement + doc.raw_text[end:]
    return ConfigurationDocument.parse(text)


def _require_modules(doc: ConfigurationDocument):
    if doc.modules_span is None:
        raise PatchError(f"'{CONFIG_MODULES_KEY}' array not found in {CONFIG_FACTORY_CALL} call")
    return doc.modules_span


def ensure_import(
    doc: ConfigurationDocument, specifier: str, binding: str | None = None
) -> ConfigurationDocument:
    """
    Prepend an import line unless the specifier is already imported.

    Args:
        doc: Document to patch
        specifier: Module specifier, e.g. "@tailwindcss/vite"
        binding: Default import name; None for a side-effect import

    Returns:
        Patched document
    """
    if specifier in doc.imports:
        return doc

    if binding:
        statement = f"import {binding} from '{specifier}'"
    else:
        statement = f"import '{specifier}'"

    logger.debug(f"Adding import: {statement}")
    return _splice(doc, 0, 0, statement + "\n")


def merge_into_module_list(doc: ConfigurationDocument, module_name: str) -> ConfigurationDocument:
    """
    Append a module to the modules array when it is not registered yet.

    The array is re-serialized on one line with single quotes, so
    ``modules: ['a','b']`` merged with "c" becomes ``modules: ['a', 'b', 'c']``.

    Args:
        doc: Document to patch
        module_name: Module to register (case-sensitive match)

    Returns:
        Patched document, or doc itself when the module is present

    Raises:
        PatchError: If the document has no modules array
    """
    span = _require_modules(doc)
    if module_name in doc.module_list:
        return doc

    tokens = [*doc.module_tokens, ModuleToken(name=module_name, raw=f"'{module_name}'")]
    rendered = f"{CONFIG_MODULES_KEY}: [{', '.join(token.render() for token in tokens)}]"

    logger.debug(f"Registering module '{module_name}'")
    return _splice(doc, span.key_start, span.close_bracket + 1, rendered)


def insert_key_block_if_absent(
    doc: ConfigurationDocument, key_name: str, block_text: str
) -> ConfigurationDocument:
    """
    Insert ``key_name: block_text`` right after the modules array.

    Presence is checked anywhere in the document, not only at the top
    level.

    Args:
        doc: Document to patch
        key_name: Key to insert, e.g. "shadcn"
        block_text: Block value including its braces

    Returns:
        Patched document

    Raises:
        PatchError: If the key is absent and there is no modules array to anchor on
    """
    if doc.has_key(key_name):
        return doc

    span = _require_modules(doc)
    insertion = f",\n  {key_name}: {block_text.strip()}"

    logger.debug(f"Inserting '{key_name}' block")
    return _splice(doc, span.close_bracket + 1, span.close_bracket + 1, insertion)


def ensure_top_level_defaults(
    doc: ConfigurationDocument, defaults: Mapping[str, str]
) -> ConfigurationDocument:
    """
    Inject option lines right after the factory call's opening brace.

    Args:
        doc: Document to patch
        defaults: Marker substring -> option line. Nothing is injected when
            any marker is already present in the document.

    Returns:
        Patched document
    """
    if not defaults or any(marker in doc.raw_text for marker in defaults):
        return doc

    injected = "".join(f"\n  {line}," for line in defaults.values())

    logger.debug(f"Injecting default options: {', '.join(defaults)}")
    return _splice(doc, doc.factory_open + 1, doc.factory_open + 1, injected)


def apply_patches(text: str, *patches: Patch) -> str:
    """
    Parse text, apply patches in order, and return the resulting text.

    Raises:
        PatchError: If the text or any intermediate result is malformed
    """
    doc = ConfigurationDocument.parse(text)
    for patch in patches:
        doc = patch(doc)
    return doc.raw_text


def patch_config_file(path: Path, *patches: Patch) -> bool:
    """
    Read a configuration file, patch it and write it back if it changed.

    The file is parsed fresh from disk and nothing is written when a patch
    fails, so a malformed result never reaches disk.

    Args:
        path: Path to nuxt.config.ts
        *patches: Document patches applied in order

    Returns:
        True if the file content changed

    Raises:
        PatchError: If the document is malformed or a precondition fails
        FilesystemError: If the file cannot be read or written
    """
    try:
        original = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(path, f"cannot read configuration: {e}") from e

    patched = apply_patches(original, *patches)
    if patched == original:
        logger.debug(f"{path.name} already up to date")
        return False

    try:
        path.write_text(patched, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(path, f"cannot write configuration: {e}") from e

    return True
