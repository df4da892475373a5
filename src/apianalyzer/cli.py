"""CLI for apianalyzer.

Provides commands: analyze (run and upload), check (local dry run).

apianalyzer/src/apianalyzer/cli.py
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from apianalyzer.config import Config, get_compiler_config, get_registry_config, load_config

console = Console()
logger = logging.getLogger(__name__)

_SEVERITY_STYLES = {"error": "red", "warning": "yellow"}


@dataclass
class AnalyzerContext:
    """Shared context for CLI commands."""

    config: Config
    verbose: bool = False


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """apianalyzer: analyze API definitions and report results to API Center."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    ctx.obj = AnalyzerContext(config=load_config(Path.cwd()), verbose=verbose)


@cli.command("analyze")
@click.argument("resource_id")
@click.option(
    "--ruleset",
    type=click.Path(exists=True, path_type=Path),
    help="TypeSpec config (tspconfig.yaml) holding the linter ruleset",
)
@click.pass_context
def analyze(ctx: click.Context, resource_id: str, ruleset: Path | None) -> None:
    """Analyze an API definition and upload the report to its registry."""
    from apianalyzer.analysis import AnalysisRequest, analyze_and_upload
    from apianalyzer.compiler import TypeSpecCompiler
    from apianalyzer.registry_client import ApiCenterClient
    from apianalyzer.resource_ids import parse_api_definition_resource_id

    analyzer_ctx: AnalyzerContext = ctx.obj

    try:
        resource = parse_api_definition_resource_id(resource_id)
        registry_config = get_registry_config(analyzer_ctx.config)
        compiler_config = get_compiler_config(analyzer_ctx.config)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(2)

    request = AnalysisRequest(api_definition=resource, ruleset_path=ruleset)
    client = ApiCenterClient(resource, registry_config)

    try:
        analyze_and_upload(request, client, TypeSpecCompiler(compiler_config))
    except Exception as e:
        logger.debug("Analysis failed", exc_info=True)
        console.print(f"[red]API analysis failed: {e}[/red]")
        ctx.exit(1)

    console.print(f"[green]Analysis of {resource.definition_name} uploaded[/green]")


@cli.command("check")
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--ruleset",
    type=click.Path(exists=True, path_type=Path),
    help="TypeSpec config (tspconfig.yaml) holding the linter ruleset",
)
@click.option(
    "--format", "-f", type=click.Choice(["human", "json"]), default="human", help="Output format"
)
@click.pass_context
def check(ctx: click.Context, spec_file: Path, ruleset: Path | None, format: str) -> None:
    """Compile a local specification and print the results without uploading."""
    from apianalyzer.compiler import CompilerError, TypeSpecCompiler
    from apianalyzer.results import to_uniform_results

    analyzer_ctx: AnalyzerContext = ctx.obj
    compiler = TypeSpecCompiler(get_compiler_config(analyzer_ctx.config))

    try:
        diagnostics = compiler.compile_from_file(
            spec_file.read_text(encoding="utf-8"), ruleset_path=ruleset
        )
    except (CompilerError, UnicodeDecodeError) as e:
        console.print(f"[red]Cannot check {spec_file.name}: {e}[/red]")
        ctx.exit(1)

    results = to_uniform_results(diagnostics, analyzer=compiler.analyzer_name)

    if format == "json":
        click.echo(json.dumps({"results": [r.to_dict() for r in results]}, indent=2))
    elif not results:
        console.print("[green]No diagnostics[/green]")
    else:
        table = Table(title=f"{spec_file.name}: {len(results)} diagnostics")
        table.add_column("Range")
        table.add_column("Severity")
        table.add_column("Rule")
        table.add_column("Description")
        for result in results:
            style = _SEVERITY_STYLES.get(result.severity, "")
            table.add_row(
                f"{result.range_start}-{result.range_end}",
                f"[{style}]{result.severity}[/{style}]" if style else result.severity,
                result.analyzer_rule_name,
                result.description,
            )
        console.print(table)

    if any(r.severity == "error" for r in results):
        ctx.exit(1)


def main() -> None:
    """Entry point for the apianalyzer console script."""
    cli()


if __name__ == "__main__":
    main()
