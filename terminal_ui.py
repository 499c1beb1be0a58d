"""Rich-based terminal UI for the document generator CLI."""

import json
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from schemas import Document, RenderStatus, SectionBlock, TemplateInfo

console = Console()

BANNER_LINES = [
    r"    ____              ______          ",
    r"   / __ \____  _____ / ____/__  ____  ",
    r"  / / / / __ \/ ___// / __/ _ \/ __ \ ",
    r" / /_/ / /_/ / /__ / /_/ /  __/ / / / ",
    r"/_____/\____/\___/ \____/\___/_/ /_/  ",
]


def setup_logging(verbose: bool = False) -> None:
    """Route stdlib logging through rich; LOG_LEVEL sets the level unless --verbose."""
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def show_banner():
    """Display the main application banner."""
    console.print()
    art_width = max(len(line) for line in BANNER_LINES)
    inner_width = console.width - 2 - 4  # border + padding
    pad = max(0, (inner_width - art_width) // 2)
    art = "\n".join(" " * pad + line.ljust(art_width) for line in BANNER_LINES)
    console.print(
        Panel(
            Text(art, style="bold cyan", no_wrap=True),
            title="[bold white]Form Template Generator[/]",
            subtitle="[dim]Pydantic Inputs  +  ReportLab Output[/]",
            border_style="cyan",
            padding=(1, 2),
        )
    )
    console.print()


def show_template_list(templates: list[TemplateInfo]):
    table = Table(
        title="Available Templates",
        show_lines=True,
        title_style="bold white",
        border_style="dim",
    )
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Required Inputs", style="dim")

    for info in templates:
        table.add_row(info.name, info.description, ", ".join(info.required_inputs))

    console.print()
    console.print(table)


def show_template_info(name: str, input_path: str):
    console.print(f"  [blue]Template:[/blue] {name}")
    console.print(f"  [dim]Input:[/dim]    {input_path}")
    console.print()


def show_outline(document: Document):
    """Display the labelled sections and addenda that were included."""
    table = Table(
        title=f"Outline: {document.title}",
        show_lines=False,
        title_style="bold white",
        border_style="dim",
    )
    table.add_column("Label", style="cyan", width=14, no_wrap=True)
    table.add_column("Section", style="white")
    table.add_column("Blocks", justify="right", width=7)

    for section in document.sections():
        label = f"{section.prefix} {section.label}" if section.prefix else f"{section.label}."
        table.add_row(label, section.title, str(_count_blocks(section)))

    console.print()
    console.print(table)


def show_warnings(warnings: list[str]):
    """Display input warnings, or a green check when there are none."""
    console.print()
    if not warnings:
        console.print(
            Panel(
                "[green]All declared fields resolved cleanly[/]",
                title="[bold green]✓ Inputs Complete[/]",
                border_style="green",
                padding=(0, 2),
            )
        )
        return
    console.print(
        Panel(
            "\n".join(f"  [yellow]○[/] {w}" for w in warnings),
            title=f"[bold yellow]{len(warnings)} Input Warning(s)[/]",
            border_style="yellow",
            padding=(0, 2),
        )
    )


def show_json_output(data: dict, output_path: str):
    """Pretty-print the content tree with syntax highlighting."""
    json_str = json.dumps(data, indent=2, default=str)
    lines = json_str.split("\n")
    if len(lines) > 60:
        display_str = "\n".join(lines[:55]) + "\n  ...\n" + "\n".join(lines[-3:])
    else:
        display_str = json_str

    console.print()
    console.print(
        Panel(
            Syntax(display_str, "json", theme="monokai", line_numbers=True),
            title=f"[bold green]Output: {output_path}[/]",
            border_style="green",
            padding=(0, 1),
        )
    )


def show_complete(document: Document, output_path: str, size_bytes: int):
    """Display the final completion panel."""
    if document.status == RenderStatus.SUCCESS:
        status = "[green bold]Document rendered.[/]"
    else:
        status = "[yellow bold]Document rendered with placeholders.[/]"
    console.print()
    console.print(
        Panel(
            f"{status}\n\n"
            f"  Template: {document.template}\n"
            f"  Sections: {len(document.sections())}\n"
            f"  Warnings: {len(document.warnings)}\n"
            f"  Size:     {size_bytes:,} bytes\n"
            f"  Output:   [underline]{output_path}[/]",
            title="[bold green]✓ Done[/]",
            border_style="green",
            padding=(1, 2),
        )
    )
    console.print()


def show_error(title: str, message: str):
    """Display an error panel."""
    console.print()
    console.print(
        Panel(
            f"[red]{message}[/]",
            title=f"[bold red]{title}[/]",
            border_style="red",
            padding=(0, 2),
        )
    )
    console.print()


def _count_blocks(section: SectionBlock) -> int:
    count = 0
    for block in section.blocks:
        count += 1
        if isinstance(block, SectionBlock):
            count += _count_blocks(block)
    return count
