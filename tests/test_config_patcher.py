"""Tests for config_patcher module."""

from functools import partial
from pathlib import Path

import pytest

from nuxt_scaffolder.config_document import ConfigurationDocument
from nuxt_scaffolder.config_patcher import (
    apply_patches,
    ensure_import,
    ensure_top_level_defaults,
    insert_key_block_if_absent,
    merge_into_module_list,
    patch_config_file,
)
from nuxt_scaffolder.errors import FilesystemError, PatchError
from nuxt_scaffolder.steps import TAILWIND_DEFAULTS, UI_BLOCK_TEMPLATE
from tests.cli_helpers import NUXT_CONFIG_TS

SIMPLE = "export default defineNuxtConfig({\n  modules: ['a']\n})\n"
NO_MODULES = "export default defineNuxtConfig({\n  ssr: false\n})\n"


def _parse(text: str) -> ConfigurationDocument:
    return ConfigurationDocument.parse(text)


class TestMergeIntoModuleList:
    """Tests for merge_into_module_list."""

    def test_appends_missing_module(self) -> None:
        """Test that the list is re-rendered with the new module last."""
        doc = _parse("export default defineNuxtConfig({\n  modules: ['@x/image','@x/icon']\n})\n")
        patched = merge_into_module_list(doc, "pinia")

        assert "modules: ['@x/image', '@x/icon', 'pinia']" in patched.raw_text
        assert patched.module_list == ("@x/image", "@x/icon", "pinia")

    def test_present_module_is_noop(self) -> None:
        """Test that nothing changes when the module is registered."""
        doc = _parse('export default defineNuxtConfig({\n  modules: [\n    "a",\n    "b",\n  ]\n})\n')

        assert merge_into_module_list(doc, "b") is doc

    def test_idempotent(self) -> None:
        """Test that a second merge leaves the text unchanged."""
        once = merge_into_module_list(_parse(SIMPLE), "shadcn-nuxt")
        twice = merge_into_module_list(once, "shadcn-nuxt")

        assert twice.raw_text == once.raw_text
        assert twice.module_list.count("shadcn-nuxt") == 1

    def test_normalizes_quotes_and_collapses_duplicates(self) -> None:
        """Test that double quotes become single and duplicates are dropped."""
        doc = _parse('export default defineNuxtConfig({ modules: ["a", "a"] })')
        patched = merge_into_module_list(doc, "b")

        assert "modules: ['a', 'b']" in patched.raw_text

    def test_keeps_tuple_entries(self) -> None:
        """Test that [name, options] entries survive the merge verbatim."""
        doc = _parse("export default defineNuxtConfig({ modules: [['i18n', { lazy: true }], 'a'] })")
        patched = merge_into_module_list(doc, "b")

        assert "modules: [['i18n', { lazy: true }], 'a', 'b']" in patched.raw_text

    def test_comments_in_array_are_dropped(self) -> None:
        """Test that a commented entry does not end up registered."""
        doc = _parse("export default defineNuxtConfig({\n  modules: ['a', // 'old'\n  ]\n})\n")
        patched = merge_into_module_list(doc, "b")

        assert patched.module_list == ("a", "b")
        assert "old" not in patched.raw_text

    def test_missing_modules_raises(self) -> None:
        """Test that a document without a modules array is rejected."""
        with pytest.raises(PatchError, match="'modules' array not found"):
            merge_into_module_list(_parse(NO_MODULES), "a")


class TestInsertKeyBlockIfAbsent:
    """Tests for insert_key_block_if_absent."""

    def test_inserts_after_modules_array(self) -> None:
        """Test placement of the new block right after the modules array."""
        patched = insert_key_block_if_absent(_parse(SIMPLE), "shadcn", "{ prefix: '' }")

        assert patched.raw_text == (
            "export default defineNuxtConfig({\n  modules: ['a'],\n  shadcn: { prefix: '' }\n})\n"
        )
        assert patched.key_blocks["shadcn"] == "{ prefix: '' }"

    def test_existing_key_is_noop(self) -> None:
        """Test that an existing key suppresses insertion."""
        doc = _parse("export default defineNuxtConfig({\n  modules: ['a'],\n  shadcn: {}\n})\n")

        assert insert_key_block_if_absent(doc, "shadcn", "{ prefix: '' }") is doc

    def test_existing_key_without_modules_is_noop(self) -> None:
        """Test that presence is checked before the modules anchor is required."""
        doc = _parse("export default defineNuxtConfig({\n  shadcn: {}\n})\n")

        assert insert_key_block_if_absent(doc, "shadcn", "{}") is doc

    def test_module_name_does_not_suppress_insertion(self) -> None:
        """Test that 'shadcn-nuxt' in the modules array does not hide the 'shadcn' key."""
        doc = _parse("export default defineNuxtConfig({\n  modules: ['shadcn-nuxt']\n})\n")
        patched = insert_key_block_if_absent(doc, "shadcn", "{}")

        assert patched.has_key("shadcn")
        assert "shadcn: {}" in patched.raw_text

    def test_idempotent(self) -> None:
        """Test that inserting twice yields one block."""
        once = insert_key_block_if_absent(_parse(SIMPLE), "shadcn", "{}")
        twice = insert_key_block_if_absent(once, "shadcn", "{}")

        assert twice.raw_text == once.raw_text
        assert twice.raw_text.count("shadcn:") == 1

    def test_missing_modules_raises(self) -> None:
        """Test that there must be a modules array to anchor on."""
        with pytest.raises(PatchError):
            insert_key_block_if_absent(_parse(NO_MODULES), "shadcn", "{}")


class TestEnsureTopLevelDefaults:
    """Tests for ensure_top_level_defaults."""

    def test_injects_after_factory_brace(self) -> None:
        """Test that option lines are injected first in the factory call."""
        patched = ensure_top_level_defaults(_parse(NO_MODULES), {"tailwind.css": "css: ['~/tailwind.css']"})

        assert patched.raw_text == (
            "export default defineNuxtConfig({\n  css: ['~/tailwind.css'],\n  ssr: false\n})\n"
        )

    def test_marker_present_is_noop(self) -> None:
        """Test that any present marker suppresses injection."""
        doc = _parse("export default defineNuxtConfig({\n  css: ['~/assets/css/tailwind.css']\n})\n")

        assert ensure_top_level_defaults(doc, TAILWIND_DEFAULTS) is doc

    def test_empty_defaults_is_noop(self) -> None:
        """Test that no defaults means no change."""
        doc = _parse(SIMPLE)

        assert ensure_top_level_defaults(doc, {}) is doc

    def test_idempotent(self) -> None:
        """Test that a second injection changes nothing."""
        once = ensure_top_level_defaults(_parse(SIMPLE), TAILWIND_DEFAULTS)
        twice = ensure_top_level_defaults(once, TAILWIND_DEFAULTS)

        assert twice.raw_text == once.raw_text
        assert "vite: { plugins: [tailwindcss()] }," in once.raw_text
        assert once.module_list == ("a",)


class TestEnsureImport:
    """Tests for ensure_import."""

    def test_prepends_default_import(self) -> None:
        """Test that a default import is added at the top."""
        patched = ensure_import(_parse(SIMPLE), "@tailwindcss/vite", "tailwindcss")

        assert patched.raw_text.startswith("import tailwindcss from '@tailwindcss/vite'\n")
        assert patched.imports == ("@tailwindcss/vite",)

    def test_side_effect_import(self) -> None:
        """Test the import form without a binding."""
        patched = ensure_import(_parse(SIMPLE), "./polyfill")

        assert patched.raw_text.startswith("import './polyfill'\n")

    def test_present_specifier_is_noop(self) -> None:
        """Test that an existing import of the specifier is left alone."""
        doc = _parse('import tw from "@tailwindcss/vite"\n' + SIMPLE)

        assert ensure_import(doc, "@tailwindcss/vite", "tailwindcss") is doc

    def test_multiline_import_is_noop(self) -> None:
        """Test that an import statement spanning several lines is recognised."""
        doc = _parse("import {\n  tailwindcss,\n  type Config,\n} from '@tailwindcss/vite'\n" + SIMPLE)

        assert doc.imports == ("@tailwindcss/vite",)
        assert ensure_import(doc, "@tailwindcss/vite", "tailwindcss").raw_text == doc.raw_text

    def test_commented_import_is_ignored(self) -> None:
        """Test that an import inside a comment does not count."""
        doc = _parse("// import tw from '@tailwindcss/vite'\n" + SIMPLE)

        patched = ensure_import(doc, "@tailwindcss/vite", "tailwindcss")

        assert patched.raw_text.startswith("import tailwindcss from '@tailwindcss/vite'\n")


class TestApplyPatches:
    """Tests for apply_patches and patch_config_file."""

    def _scaffold_patches(self) -> tuple:
        return (
            partial(ensure_top_level_defaults, defaults=TAILWIND_DEFAULTS),
            partial(ensure_import, specifier="@tailwindcss/vite", binding="tailwindcss"),
            partial(merge_into_module_list, module_name="shadcn-nuxt"),
            partial(
                insert_key_block_if_absent,
                key_name="shadcn",
                block_text=UI_BLOCK_TEMPLATE.format(target_dir="app"),
            ),
        )

    def test_generated_config_round_trip(self) -> None:
        """Test the full patch sequence on a freshly generated config."""
        patched = apply_patches(NUXT_CONFIG_TS, *self._scaffold_patches())
        doc = _parse(patched)

        assert doc.imports == ("@tailwindcss/vite",)
        assert doc.module_list == ("@nuxt/image", "@nuxt/icon", "@pinia/nuxt", "shadcn-nuxt")
        assert "componentDir: 'app/components/ui'" in doc.key_blocks["shadcn"]
        assert "compatibilityDate: '2025-07-15'" in patched
        assert apply_patches(patched, *self._scaffold_patches()) == patched

    def test_patch_config_file_writes_only_on_change(self, tmp_path: Path) -> None:
        """Test that an unchanged document is not rewritten."""
        path = tmp_path / "nuxt.config.ts"
        path.write_text(SIMPLE, encoding="utf-8")
        patch = partial(merge_into_module_list, module_name="b")

        assert patch_config_file(path, patch) is True
        assert "modules: ['a', 'b']" in path.read_text(encoding="utf-8")
        assert patch_config_file(path, patch) is False

    def test_malformed_file_is_not_written(self, tmp_path: Path) -> None:
        """Test that a failing patch leaves the file untouched."""
        path = tmp_path / "nuxt.config.ts"
        path.write_text(NO_MODULES, encoding="utf-8")

        with pytest.raises(PatchError):
            patch_config_file(
                path,
                partial(ensure_import, specifier="x", binding="x"),
                partial(merge_into_module_list, module_name="b"),
            )

        assert path.read_text(encoding="utf-8") == NO_MODULES

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that a missing file is reported as a filesystem failure."""
        with pytest.raises(FilesystemError):
            patch_config_file(tmp_path / "nuxt.config.ts")
