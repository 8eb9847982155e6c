"""Command-line interface for gql-tsgen."""

import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click

from .core.config import DEFAULT_CONFIG_FILE, ConfigError, load_config, write_default_config
from .core.generator import CodeGenerator
from .core.ir import SchemaError
from .core.parser import SchemaParser, is_url

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            tar_ref.extractall(temp_dir, filter="data")
    else:
        shutil.rmtree(temp_dir)
        raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


@click.group()
@click.version_option(package_name="gql-tsgen")
def main():
    """GraphQL to TypeScript client generator.

    Generate typed request functions and React Query hooks from GraphQL schemas.
    """
    pass


@main.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(),
    default=None,
    help=f"Configuration file (default: ./{DEFAULT_CONFIG_FILE} when present).",
)
@click.option(
    "--schema",
    "-s",
    default=None,
    help="Schema file, directory, archive (.zip, .tar.gz, .tgz) or endpoint URL.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output directory for generated code.",
)
@click.option(
    "--template-dir",
    "-t",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory with templates overriding the built-in ones.",
)
@click.option(
    "--required-check",
    type=click.Choice(["truthy", "presence"]),
    default=None,
    help="How generated functions decide a required argument is missing.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(config_path, schema, output, template_dir, required_check, verbose):
    """Generate a TypeScript client from a GraphQL schema.

    Examples:

        gql-tsgen generate

        gql-tsgen generate --schema ./schema.graphql --output ./src/gpl

        gql-tsgen generate -s https://api.example.com/graphql -o ./src/gpl
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    overrides = {}
    if schema:
        overrides["schema_path"] = schema
    if template_dir:
        overrides["template_dir"] = template_dir
    if required_check:
        overrides["required_check"] = required_check
    if overrides:
        config = config.model_copy(update=overrides)
    output_path = Path(output or config.output.path).resolve()

    temp_dir = None
    try:
        # Handle archives
        schema_location = config.schema_path
        if not is_url(schema_location):
            schema_path = Path(schema_location).resolve()
            if not schema_path.exists():
                raise click.ClickException(f"Schema not found: {schema_path}")
            schema_location = str(schema_path)
            if schema_path.is_file() and schema_path.name.lower().endswith(ARCHIVE_SUFFIXES):
                click.echo(f"Extracting archive {schema_path.name}...")
                temp_dir = extract_archive(schema_path)
                schema_location = temp_dir
                if verbose:
                    click.echo(f"  Extracted to: {temp_dir}")

        if verbose:
            click.echo(f"Schema: {schema_location}")
            click.echo(f"Output: {output_path}")

        # Parse schema
        click.echo("Parsing schema...")
        parser = SchemaParser(schema_location, headers=config.headers)
        ir = parser.parse_all()

        if verbose:
            click.echo(f"  Scalars: {len(ir.scalars)}")
            click.echo(f"  Enums: {len(ir.enums)}")
            click.echo(f"  Types: {len(ir.types)}")
            click.echo(f"  Inputs: {len(ir.inputs)}")
            click.echo(f"  Interfaces: {len(ir.interfaces)}")
            click.echo(f"  Unions: {len(ir.unions)}")
            click.echo(f"  Queries: {len(ir.queries)}")
            click.echo(f"  Mutations: {len(ir.mutations)}")

        # Generate code
        click.echo("Generating code...")
        generator = CodeGenerator(ir, str(output_path), config=config)
        written = generator.generate()

        if verbose:
            for filename in written:
                click.echo(f"  {filename}")
        click.echo(f"Done! Generated code in {output_path}")
    except (SchemaError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


@main.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Where to write the configuration file.",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file.")
def init(path, force):
    """Write a configuration file with the default settings."""
    target = Path(path)
    if target.exists() and not force:
        raise click.ClickException(f"{target} already exists (use --force to overwrite)")
    write_default_config(target)
    click.echo(f"Wrote {target}")


if __name__ == "__main__":
    main()
