"""nuxt-scaffolder: Create Nuxt 4 projects with Tailwind CSS, Pinia and shadcn-nuxt."""

__version__ = "0.1.0"
