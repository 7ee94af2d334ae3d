"""doc-engineのコマンドラインインターフェース。

終了コード: 0 = 問題なし、1 = Fail・診断・相互参照失敗あり、2 = ルール読み込み・パスのエラー。
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from docengine.checks.loader import load_rule_set
from docengine.config import EngineConfig
from docengine.models.errors import DocEngineError
from docengine.models.rules import RuleSet
from docengine.reporter import (
    render_cross_reference,
    render_rules,
    render_scan,
    render_validation,
)
from docengine.services.scan import ScanConfig, ScanService, parse_check_filter
from docengine.services.spec import SpecService

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2

app = typer.Typer(add_completion=False, help="Documentation compliance engine.")
spec_app = typer.Typer(add_completion=False, help="Validate and cross-reference spec files.")
app.add_typer(spec_app, name="spec")


def _fail(error: DocEngineError) -> typer.Exit:
    typer.echo(f"error: {error}", err=True)
    return typer.Exit(code=EXIT_ERROR)


def _load_rules(config: EngineConfig, rules: Optional[Path]) -> RuleSet:
    return load_rule_set(rules if rules is not None else config.effective_rules_path)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    config = EngineConfig()
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def scan(
    path: Path = typer.Argument(..., help="Project root to scan."),
    json_output: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
    project_type: Optional[str] = typer.Option(
        None, "--type", help="Project type override (open_source or internal)."
    ),
    project_scope: Optional[str] = typer.Option(
        None, "--scope", help="Project scope (small, medium or large)."
    ),
    checks: Optional[str] = typer.Option(None, "--checks", help="Check ids to run, e.g. 1-5,9."),
    rules: Optional[Path] = typer.Option(None, "--rules", help="Rule document to load."),
) -> None:
    """Run every compliance check against PATH."""
    config = EngineConfig()
    if project_type is not None and project_type not in ("open_source", "internal"):
        raise typer.BadParameter(f"unknown project type '{project_type}'", param_hint="--type")
    if project_scope is not None and project_scope not in ("small", "medium", "large"):
        raise typer.BadParameter(f"unknown scope '{project_scope}'", param_hint="--scope")

    try:
        rule_set = _load_rules(config, rules)
        scan_config = ScanConfig(
            project_type=project_type or config.project_type,
            project_scope=project_scope or config.project_scope,
            checks=parse_check_filter(checks) if checks else None,
        )
        report = ScanService(rule_set).scan(path, scan_config)
    except DocEngineError as e:
        raise _fail(e) from e

    typer.echo(report.model_dump_json(indent=2) if json_output else render_scan(report))
    raise typer.Exit(code=EXIT_FINDINGS if report.has_failures else EXIT_OK)


@spec_app.command("validate")
def spec_validate(
    path: Path = typer.Argument(..., help="Project root holding spec files."),
    json_output: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Parse and schema-check every spec file under PATH."""
    try:
        report = SpecService().validate(path)
    except DocEngineError as e:
        raise _fail(e) from e

    typer.echo(report.model_dump_json(indent=2) if json_output else render_validation(report))
    raise typer.Exit(code=EXIT_FINDINGS if report.has_errors else EXIT_OK)


@spec_app.command("cross-ref")
def spec_cross_ref(
    path: Path = typer.Argument(..., help="Project root holding spec files."),
    json_output: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Check references between spec files under PATH."""
    try:
        report = SpecService().cross_reference(path)
    except DocEngineError as e:
        raise _fail(e) from e

    typer.echo(report.model_dump_json(indent=2) if json_output else render_cross_reference(report))
    raise typer.Exit(code=EXIT_FINDINGS if report.has_failures else EXIT_OK)


@app.command("rules")
def list_rules(
    rules: Optional[Path] = typer.Option(None, "--rules", help="Rule document to load."),
) -> None:
    """List the loaded rules in execution order."""
    try:
        rule_set = _load_rules(EngineConfig(), rules)
    except DocEngineError as e:
        raise _fail(e) from e
    typer.echo(render_rules(rule_set))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
) -> None:
    """Start the MCP server over streamable HTTP."""
    from docengine.server import run_http

    config = EngineConfig()
    if host is not None:
        config.host = host
    if port is not None:
        config.port = port
    try:
        run_http(config)
    except DocEngineError as e:
        raise _fail(e) from e
