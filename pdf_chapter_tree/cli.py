import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .errors import ChapterTreeError
from .extract import ChapterTree


EXAMPLES = """\b
Examples:
  pdf-chapter-tree document.pdf              # all levels as Markdown
  pdf-chapter-tree -t document.pdf           # all levels as a tree
  pdf-chapter-tree -d 2 document.pdf         # only 2 levels
  pdf-chapter-tree -t -d 2 document.pdf      # 2 levels as a tree
  pdf-chapter-tree -i 4 document.pdf         # 4-space indent (Obsidian)
"""

USAGE_ERROR_STATUS = 2

app = typer.Typer(add_completion=False, help="PDF outline → Markdown list or tree")


@app.command(epilog=EXAMPLES, context_settings={"help_option_names": ["-h", "--help"]})
def show(
    pdf_path: Path = typer.Argument(..., metavar="PDF_FILE", help="PDF file to read"),
    depth: Optional[int] = typer.Option(
        None, "--depth", "-d", min=1, metavar="LEVEL", help="Display only LEVEL levels of hierarchy"
    ),
    tree: bool = typer.Option(False, "--tree", "-t", help="Tree format instead of a Markdown list"),
    indent: int = typer.Option(2, "--indent", "-i", min=1, metavar="SPACES", help="Indent width"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
):
    """Extract the chapter structure (outline/bookmarks) of a PDF file and print it
    as a Markdown list, or as a tree with --tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        chapter_tree = ChapterTree(pdf_path)
        if tree:
            output = chapter_tree.to_tree(max_depth=depth, indent=indent)
        else:
            output = chapter_tree.to_markdown(max_depth=depth, indent=indent)
    except ChapterTreeError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(output)


def run(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status.

    typer reports usage errors itself and exits with 2; those map to 1.
    """
    try:
        app(args=argv, prog_name="pdf-chapter-tree")
    except SystemExit as e:
        if e.code is None:
            return 0
        if not isinstance(e.code, int):
            typer.echo(e.code, err=True)
            return 1
        return 1 if e.code == USAGE_ERROR_STATUS else e.code
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
