from __future__ import annotations
import logging
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from dotenv import load_dotenv
from .config import Settings
from .errors import RegexToolError
from .mcp import serve_stdio
from .report import format_replace, format_search
from .runner import BatchRunner

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(add_completion=False, help="Regex search and find-and-replace across files.")
console = Console()
# stdout carries MCP traffic in serve mode
err_console = Console(stderr=True)


def _setup(root: str | None, log_level: str | None) -> Settings:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise typer.BadParameter(str(e))
    if root:
        settings.root = root
    if log_level:
        settings.log_level = log_level.upper()
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    return settings


@app.command()
def serve(root: str = typer.Option(None, help="Directory relative globs resolve against (default: cwd)"),
          log_level: str = typer.Option(None, help="Logging level (default: $REGEX_MCP_LOG_LEVEL or WARNING)")):
    """Run the MCP server on stdin/stdout."""
    serve_stdio(_setup(root, log_level))


@app.command()
def search(pattern: str = typer.Argument(..., help="Regex pattern (Python re syntax)"),
           files: str = typer.Argument(..., help="Glob for files, e.g. 'src/**/*.py'"),
           limit: int = typer.Option(None, min=0, help="Maximum matches to return (default: 50)"),
           root: str = typer.Option(None, help="Directory relative globs resolve against"),
           log_level: str = typer.Option(None, help="Logging level")):
    """Search files for regex matches."""
    runner = BatchRunner(settings=_setup(root, log_level))
    try:
        result = runner.search(pattern, files, limit)
    except (RegexToolError, ValueError) as e:
        err_console.print(f"Error: {e}", style="bold red", markup=False, highlight=False)
        raise typer.Exit(1)
    console.print(format_search(result), highlight=False, markup=False, soft_wrap=True)


@app.command()
def replace(pattern: str = typer.Argument(..., help="Regex pattern (Python re syntax)"),
            replacement: str = typer.Argument(..., help="Replacement; $1, $2 insert capture groups, $0 the whole match"),
            files: str = typer.Argument(..., help="Glob for files, e.g. 'src/**/*.py'"),
            dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without writing"),
            limit: int = typer.Option(None, min=0, help="Maximum matches to replace across all files"),
            diff: bool = typer.Option(False, "--diff", help="Show unified diffs instead of changed lines"),
            root: str = typer.Option(None, help="Directory relative globs resolve against"),
            log_level: str = typer.Option(None, help="Logging level")):
    """Replace regex matches in files."""
    runner = BatchRunner(settings=_setup(root, log_level))
    try:
        result = runner.replace(pattern, replacement, files, dry_run=dry_run, limit=limit)
    except (RegexToolError, ValueError) as e:
        err_console.print(f"Error: {e}", style="bold red", markup=False, highlight=False)
        raise typer.Exit(1)
    if diff:
        for f in result.files_changed:
            console.print(f"[bold]{escape(f.path)}[/bold] [green]+{f.added}[/green] [red]-{f.removed}[/red]",
                          highlight=False)
            console.print(Syntax(f.diff, "diff", theme="ansi_dark"))
    console.print(format_replace(result), highlight=False, markup=False, soft_wrap=True)


def main():
    app()


if __name__ == "__main__":
    main()
