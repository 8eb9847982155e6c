"""Jinja2 environment and filters shared by the emitters.

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import re
from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined, select_autoescape


def module_path(filename: str) -> str:
    """Turn an output filename into a relative import path: 'gpl.d.ts' -> './gpl.d'."""
    return "./" + re.sub(r"\.tsx?$", "", filename)


def doc_lines(text: str | None) -> list[str]:
    """Split a description into lines safe to place inside a /** */ comment."""
    if not text:
        return []
    text = text.replace("*/", "*\\/")
    return [line.rstrip() for line in text.strip().splitlines()]


def create_environment(template_dir: str | None = None) -> Environment:
    """Build the template environment; templates in template_dir win."""
    loaders = []
    if template_dir:
        template_path = Path(template_dir)
        if template_path.is_dir():
            loaders.append(FileSystemLoader(str(template_path)))
    loaders.append(PackageLoader("gql_tsgen", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["doc_lines"] = doc_lines
    return env
