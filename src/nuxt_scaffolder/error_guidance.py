"""Actionable error guidance for common failure scenarios."""

import platform
from dataclasses import dataclass


@dataclass
class ErrorGuidance:
    """Structured error guidance with checks and suggestions."""

    title: str
    checks: list[str]  # Things to check
    fixes: list[str]  # How to fix
    examples: list[str] | None = None  # Example commands


class GuidanceProvider:
    """Provides context-aware guidance for errors."""

    @staticmethod
    def get_bun_not_found() -> ErrorGuidance:
        """Guidance when bun is not installed."""
        if platform.system() == "Windows":
            fixes = [
                'PowerShell: powershell -c "irm bun.sh/install.ps1 | iex"',
                "Or with npm: npm install -g bun",
            ]
        else:
            fixes = [
                "Install bun: curl -fsSL https://bun.sh/install | bash",
                "Or with Homebrew: brew install oven-sh/bun/bun",
                "Or with npm: npm install -g bun",
            ]

        return ErrorGuidance(
            title="Bun is not installed or not in PATH",
            checks=["Verify bun is installed: which bun", "Check PATH includes ~/.bun/bin"],
            fixes=fixes,
            examples=["bun --version"],
        )

    @staticmethod
    def get_ui_library_failed(project_dir: str, command: str) -> ErrorGuidance:
        """Guidance when the UI component library could not be set up."""
        return ErrorGuidance(
            title="There was an issue with the shadcn-vue setup",
            checks=[
                f"Run the command manually to see its output: cd {project_dir} && {command}",
                "Check for compatibility between shadcn-vue and Nuxt 4",
            ],
            fixes=[
                "Install shadcn-vue manually in your project after completion",
                "Try a different shadcn-vue version by editing [tools.commands] in your config",
                "Run 'nuxt-scaffolder create' again; completed steps are skipped",
            ],
            examples=[f"cd {project_dir}", command],
        )

    @staticmethod
    def format_guidance(guidance: ErrorGuidance) -> str:
        """Format guidance as rich-compatible string."""
        lines = [f"[bold yellow]{guidance.title}[/bold yellow]\n"]

        if guidance.checks:
            lines.append("[cyan]Checks:[/cyan]")
            for check in guidance.checks:
                lines.append(f"  • {check}")
            lines.append("")

        if guidance.fixes:
            lines.append("[cyan]How to fix:[/cyan]")
            for fix in guidance.fixes:
                lines.append(f"  • {fix}")
            lines.append("")

        if guidance.examples:
            lines.append("[cyan]Try these commands:[/cyan]")
            for example in guidance.examples:
                lines.append(f"  $ {example}")

        return "\n".join(lines)
