"""
Norm Audit Command Line
=======================

Runs case audits, norm searches, claim-basis lookups and limitation
calculations against the bundled (or configured) knowledge base.

Usage:
    norm-audit audit sachverhalt.txt anklage.txt --case-id AZ-2024-17
    norm-audit search "Betrug Täuschung Vermögensschaden" --limit 5
    norm-audit verjaehrung --knowledge-date 2020-06-15
    norm-audit export-registry --output registry.json
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from norm_audit import __version__
from norm_audit.config import EngineConfig, get_engine_config
from norm_audit.exceptions import NormAuditError
from norm_audit.models.norms.case_audit import CaseAuditResult, CaseDocument
from norm_audit.models.norms.legal_norm import Jurisdiction
from norm_audit.services.norms.anspruchsgrundlage_finder import AnspruchsgrundlageChainFinder
from norm_audit.services.norms.case_audit_orchestrator import CaseAuditOrchestrator
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase
from norm_audit.services.norms.norm_search_service import NormSearchService
from norm_audit.services.norms.verjaehrung_calculator import VerjaehrungsCalculator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

JURISDICTION_CHOICE = click.Choice([j.value for j in Jurisdiction], case_sensitive=False)


class EngineContext:
    """Lazily loaded engine collaborators shared by subcommands"""

    def __init__(self, config: EngineConfig):
        self.config = config
        self._knowledge_base: Optional[NormKnowledgeBase] = None

    @property
    def parameters(self):
        return self.config.get_scoring_parameters()

    @property
    def knowledge_base(self) -> NormKnowledgeBase:
        if self._knowledge_base is None:
            path = self.config.get_knowledge_base_path()
            if path is not None:
                self._knowledge_base = NormKnowledgeBase.from_json_file(path)
            else:
                self._knowledge_base = NormKnowledgeBase.load_default()
        return self._knowledge_base


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _print_audit(result: CaseAuditResult) -> None:
    click.echo("=" * 60)
    click.echo(f"Aktenaudit {result.case_id} ({result.stats.total_documents_audited} Dokumente)")
    click.echo("=" * 60)
    click.echo(f"Risiko: {result.overall_risk_score}/100 ({result.risk_level})")
    click.echo(result.summary)

    if result.detected_norms:
        click.echo("\nErkannte Normen:")
        for norm in result.detected_norms:
            click.echo(f"  {norm.law} {norm.paragraph:<12} {norm.overall_score:.0%}  {norm.norm_title}")

    if result.reclassifications:
        click.echo("\nReklassifizierung:")
        for suggestion in result.reclassifications:
            click.echo(
                f"  [{suggestion.direction}] {suggestion.current_norm_title} "
                f"→ {suggestion.suggested_norm_title} ({suggestion.confidence:.0%})"
            )

    gaps = [gap for b in result.beweislast_analysis for gap in b.identified_gaps]
    if gaps:
        click.echo("\nBeweislast-Lücken:")
        for gap in gaps:
            click.echo(f"  - {gap}")


@click.group()
@click.version_option(__version__, prog_name="norm-audit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to engine_config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """
    Legal norm classification and risk-scoring engine

    All output is an assistive suggestion and requires legal review.
    """
    config = get_engine_config(config_path)
    level = logging.DEBUG if verbose else getattr(logging, config.get_log_level(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    ctx.obj = EngineContext(config)


@main.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--case-id", default="case", show_default=True, help="Case identifier")
@click.option("--workspace-id", default="default", show_default=True, help="Workspace identifier")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_obj
def audit(obj: EngineContext, files: Tuple[Path, ...], case_id: str, workspace_id: str, as_json: bool):
    """Run a case audit over text FILES"""
    try:
        documents = [
            CaseDocument(id=path.stem, title=path.name, text=path.read_text(encoding="utf-8"))
            for path in files
        ]
        orchestrator = CaseAuditOrchestrator(obj.knowledge_base, obj.parameters)
        result = orchestrator.run_case_audit(case_id, workspace_id, documents)
    except NormAuditError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        _echo_json(result.model_dump(mode="json"))
    else:
        _print_audit(result)


@main.command()
@click.argument("query")
@click.option("--limit", type=int, default=10, show_default=True, help="Maximum results")
@click.option("--jurisdiction", "jurisdictions", multiple=True, type=JURISDICTION_CHOICE)
@click.pass_obj
def search(obj: EngineContext, query: str, limit: int, jurisdictions: Tuple[str, ...]):
    """Search norms matching QUERY"""
    try:
        service = NormSearchService(obj.knowledge_base, obj.parameters)
        results = service.search_norms(query, limit, [j.upper() for j in jurisdictions])
    except NormAuditError as e:
        raise click.ClickException(e.message) from e

    if not results:
        click.echo("Keine passenden Normen gefunden.")
        return
    for match in results:
        click.echo(
            f"{match.match_score:.2f}  [{match.norm.jurisdiction}] {match.match_context}"
            f"  ({', '.join(match.matched_keywords)})"
        )


@main.command()
@click.argument("text_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--jurisdiction", "jurisdictions", multiple=True, type=JURISDICTION_CHOICE)
@click.pass_obj
def claims(obj: EngineContext, text_file: Path, jurisdictions: Tuple[str, ...]):
    """List claim bases (Anspruchsgrundlagen) supported by TEXT_FILE"""
    try:
        finder = AnspruchsgrundlageChainFinder(obj.knowledge_base, obj.parameters)
        chains = finder.find_anspruchsgrundlagen(
            text_file.read_text(encoding="utf-8"), [j.upper() for j in jurisdictions]
        )
    except NormAuditError as e:
        raise click.ClickException(e.message) from e

    if not chains:
        click.echo("Keine Anspruchsgrundlagen erkannt.")
        return
    for chain in chains:
        click.echo(f"[{chain.success_probability_hint}] {chain.title} - {chain.beweislast}")
        for objection in chain.einwendungen:
            click.echo(f"    Einwendung: {objection.law} {objection.paragraph} {objection.title}")
        for defense in chain.einreden:
            click.echo(f"    Einrede: {defense.law} {defense.paragraph} {defense.title}")


@main.command()
@click.option("--norm-id", default=None, help="Limitation norm (default: general period)")
@click.option("--knowledge-date", default=None, help="Date of knowledge (YYYY-MM-DD)")
@click.option("--event-date", default=None, help="Event date (YYYY-MM-DD)")
@click.pass_obj
def verjaehrung(
    obj: EngineContext,
    norm_id: Optional[str],
    knowledge_date: Optional[str],
    event_date: Optional[str],
):
    """Calculate limitation-period expiry"""
    try:
        calculator = VerjaehrungsCalculator(obj.knowledge_base, obj.parameters)
        result = calculator.calculate_verjaehrung(
            norm_id=norm_id, knowledge_date=knowledge_date, event_date=event_date
        )
    except NormAuditError as e:
        raise click.ClickException(e.message) from e

    if result is None:
        raise click.ClickException(f"No limitation period known for norm {norm_id}")
    _echo_json(result.model_dump(mode="json"))


@main.command("export-registry")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write JSON to this file instead of stdout",
)
@click.pass_obj
def export_registry(obj: EngineContext, output: Optional[Path]):
    """Export the knowledge base grouped by jurisdiction"""
    try:
        registry = NormSearchService(obj.knowledge_base, obj.parameters).export_registry()
    except NormAuditError as e:
        raise click.ClickException(e.message) from e

    if output is None:
        _echo_json(registry)
        return

    output.write_text(json.dumps(registry, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    logger.info("Registry with %d norms written to %s", registry["total_norms"], output)
    click.echo(f"Registry written to {output}")


if __name__ == "__main__":
    main()
