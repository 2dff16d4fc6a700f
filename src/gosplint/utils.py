"""Console output helpers: results on stdout, diagnostics on stderr."""

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def emit(text: str) -> None:
    """Print a result line verbatim: no markup, no highlighting, no wrapping."""
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def log(message: str, style: str = "") -> None:
    """Write a diagnostic message to stderr with an optional rich style."""
    if style:
        err_console.print(message, style=style, markup=False, emoji=False, highlight=False, soft_wrap=True)
    else:
        err_console.print(message, markup=False, emoji=False, highlight=False, soft_wrap=True)
