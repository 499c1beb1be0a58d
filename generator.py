#!/usr/bin/env python3
"""DocGen: render legal and real-estate form templates from JSON input maps.

Usage:
    python generator.py --list
    python generator.py --template florida_lease --input data.json
    python generator.py --template invoice --input data.json --format json --output dist/invoice.json
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from pdf_renderer import render_pdf
from template_registry import TemplateNotFoundError, get_template, list_templates, render_document
from terminal_ui import (
    console,
    setup_logging,
    show_banner,
    show_complete,
    show_error,
    show_json_output,
    show_outline,
    show_template_info,
    show_template_list,
    show_warnings,
)

log = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docgen",
        description="Render legal and real-estate documents from a JSON input map.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available templates and exit",
    )
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="Template name or docgen://templates/<name> URI",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Path to a JSON file holding the input map (default: empty map)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path (default: $DOCGEN_OUTPUT_DIR/<template>.<format>)",
    )
    parser.add_argument(
        "--format",
        choices=["pdf", "json"],
        default="pdf",
        help="pdf renders the document; json writes the content tree",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging and print the content tree",
    )
    return parser.parse_args(argv)


def load_inputs(path: str | None) -> dict:
    """Read the input map from a JSON file.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if it is not valid JSON or not a JSON object.
    """
    if path is None:
        return {}
    input_path = Path(path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    try:
        data = json.loads(input_path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def default_output_path(template_name: str, fmt: str) -> Path:
    return Path(os.getenv("DOCGEN_OUTPUT_DIR", "dist")) / f"{template_name}.{fmt}"


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_logging(args.verbose)

    show_banner()

    if args.list:
        show_template_list(list_templates())
        return 0

    if not args.template:
        show_error("Missing Template", "Pass --template <name> or --list to see what is available.")
        return 2

    try:
        template = get_template(args.template)
        inputs = load_inputs(args.input)
    except TemplateNotFoundError as e:
        show_error("Unknown Template", str(e))
        return 1
    except (FileNotFoundError, ValueError) as e:
        show_error("Invalid Input", str(e))
        return 1

    show_template_info(template.name, args.input or "(empty input map)")

    with console.status("[bold green]Composing document...", spinner="dots"):
        document = render_document(template.name, inputs)

    show_outline(document)
    show_warnings(document.warnings)

    output_path = Path(args.output) if args.output else default_output_path(template.name, args.format)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if args.format == "json":
        payload = document.model_dump(mode="json")
        output_path.write_text(json.dumps(payload, indent=2))
        show_json_output(payload, str(output_path))
        size = output_path.stat().st_size
    else:
        with console.status("[bold green]Rendering PDF...", spinner="dots"):
            pdf = render_pdf(document)
        output_path.write_bytes(pdf)
        size = len(pdf)
        if args.verbose:
            show_json_output(document.model_dump(mode="json"), str(output_path))

    log.info("Wrote %s (%d bytes)", output_path, size)
    show_complete(document, str(output_path), size)
    return 0


if __name__ == "__main__":
    sys.exit(main())
