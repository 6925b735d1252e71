"""Starter files written into a freshly scaffolded project."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .constants import WriteOutcome
from .errors import FilesystemError
from .utils import ensure_dir

logger = logging.getLogger(__name__)

APP_VUE = """<template>
  <div>
    <NuxtRouteAnnouncer />
    <NuxtLoadingIndicator />
    <NuxtLayout>
      <NuxtPage />
    </NuxtLayout>
  </div>
</template>
"""

DEFAULT_LAYOUT_VUE = """<template>
  <div>
    <slot />
  </div>
</template>
"""

INDEX_PAGE_VUE = """<template>
  <div class="container mx-auto pt-6">
    <h1 class="text-4xl font-semibold text-pink-600">Hello Nuxt 4!</h1>
    <Button>Click Me!</Button>
  </div>
</template>

<script lang="ts" setup>
import { Button } from "~/components/ui/button";
</script>
"""

EXAMPLE_STORE_TS = """export const useExampleStore = defineStore("example", () => {
  const count = ref(0);
  const name = ref("Pinia Test");
  const doubleCount = computed(() => count.value * 2);
  function increment() {
    count.value++;
  }
  return { count, name, doubleCount, increment };
});
"""

TAILWIND_CSS = '@import "tailwindcss";\n'

BUTTON_VUE = """<script setup lang="ts">
defineProps<{ type?: "button" | "submit" | "reset" }>();
</script>

<template>
  <button
    :type="type ?? 'button'"
    class="inline-flex items-center justify-center rounded-md bg-neutral-900 px-4 py-2 text-sm font-medium text-white hover:bg-neutral-700"
  >
    <slot />
  </button>
</template>
"""

BUTTON_INDEX_TS = 'export { default as Button } from "./Button.vue";\n'


@dataclass(frozen=True)
class StarterFile:
    """A starter file, relative to the target root."""

    relative_path: str
    content: str
    description: str


STARTER_FILES: dict[str, StarterFile] = {
    "entry-file": StarterFile("app.vue", APP_VUE, "root entry file"),
    "default-layout": StarterFile("layouts/default.vue", DEFAULT_LAYOUT_VUE, "default layout"),
    "index-page": StarterFile("pages/index.vue", INDEX_PAGE_VUE, "index page"),
    "example-store": StarterFile("stores/example.ts", EXAMPLE_STORE_TS, "example Pinia store"),
}

TAILWIND_STYLESHEET = StarterFile("assets/css/tailwind.css", TAILWIND_CSS, "Tailwind stylesheet")

UI_COMPONENT_DIR = "components/ui/button"
UI_COMPONENT_FILES: tuple[StarterFile, ...] = (
    StarterFile(f"{UI_COMPONENT_DIR}/Button.vue", BUTTON_VUE, "sample Button component"),
    StarterFile(f"{UI_COMPONENT_DIR}/index.ts", BUTTON_INDEX_TS, "sample Button export"),
)


def write_if_absent(path: Path, content: str) -> WriteOutcome:
    """
    Write a file only if nothing exists at path.

    Existing content is never read or compared; existence alone gates the
    write. Parent directories are created as needed.

    Args:
        path: File to create
        content: Content to write

    Returns:
        WriteOutcome.CREATED or WriteOutcome.SKIPPED_EXISTING

    Raises:
        FilesystemError: If the file cannot be written
    """
    try:
        if path.exists():
            logger.debug(f"{path} already exists, skipping")
            return WriteOutcome.SKIPPED_EXISTING
        ensure_dir(path.parent)
    except OSError as e:
        raise FilesystemError(path.parent, f"cannot create directory: {e}") from e

    try:
        f = open(path, "x", encoding="utf-8")
    except FileExistsError:
        return WriteOutcome.SKIPPED_EXISTING
    except OSError as e:
        raise FilesystemError(path, f"cannot write file: {e}") from e

    try:
        with f:
            f.write(content)
    except OSError as e:
        # A partial file would be skipped as existing on the next run
        path.unlink(missing_ok=True)
        raise FilesystemError(path, f"cannot write file: {e}") from e

    logger.info(f"Created {path}")
    return WriteOutcome.CREATED


def materialize(target_root: Path, starter: StarterFile) -> WriteOutcome:
    """Write one starter file below the target root if it is absent."""
    return write_if_absent(target_root / starter.relative_path, starter.content)
