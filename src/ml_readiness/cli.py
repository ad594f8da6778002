"""CLI for the ML Readiness Assessment.

Terminal presentation layer: prompts for answers, calls the engine's
operations and renders the session snapshot. The session is saved after
every change, so the assessment can be taken across several invocations.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .app_logging import setup_logging
from .catalog import SECTION_DEFINITIONS, WISCAR_DIMENSIONS, get_question, get_section_definition
from .config import (
    AssessmentConfig,
    find_config_file,
    get_config,
    load_config,
    reset_config,
    save_default_config,
)
from .engine import AssessmentEngine
from .exceptions import AssessmentError, InvalidResponseError
from .schema import RATING_MIN, AssessmentResults, QuestionDefinition, QuestionKind, Recommendation, SectionId
from .storage import JsonFileSessionStore
from .synthesizer import describe_recommendation

console = Console()

RECOMMENDATION_COLORS = {
    Recommendation.YES: "green",
    Recommendation.MAYBE: "yellow",
    Recommendation.NO: "red",
}


@dataclass
class CliState:
    """Options shared by every command."""
    config: AssessmentConfig
    state_dir: Path
    strict: bool
    _engine: Optional[AssessmentEngine] = None

    @property
    def engine(self) -> AssessmentEngine:
        if self._engine is None:
            self._engine = AssessmentEngine(
                store=JsonFileSessionStore(self.state_dir),
                key=self.config.storage.key,
                strict=self.strict,
            )
            if self._engine.storage_warning:
                console.print(f"[yellow]⚠ {self._engine.storage_warning}[/yellow]")
        return self._engine


def section_choice() -> click.Choice:
    return click.Choice([s.value for s in SectionId], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="ml-readiness")
@click.option(
    "--state-dir", "-s",
    type=click.Path(file_okay=False),
    help="Directory where the session is saved (default: from config)"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a readiness-config.yaml file"
)
@click.option(
    "--debug",
    is_flag=True,
    help="Verbose logging and strict id checking"
)
@click.pass_context
def main(ctx: click.Context, state_dir: Optional[str], config_path: Optional[str], debug: bool):
    """Am I ready to become an ML engineer?

    A three-section self-assessment (psychometric, technical, WISCAR) that
    scores each section and recommends whether to pursue ML engineering.
    """
    try:
        path = Path(config_path) if config_path else find_config_file()
        if path:
            config = load_config(path)
        else:
            reset_config()
            config = get_config()
    except Exception as e:
        console.print(f"[red]Error: could not load configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    setup_logging("DEBUG" if debug else config.log_level, dev_mode=debug)

    ctx.obj = CliState(
        config=config,
        state_dir=Path(state_dir) if state_dir else config.storage.directory,
        strict=debug or config.strict,
    )


@main.command("questions")
@click.argument("section", required=False, type=section_choice())
def questions_cmd(section: Optional[str]):
    """List the questions of one or all sections."""
    definitions = [get_section_definition(section)] if section else list(SECTION_DEFINITIONS)
    rating_max = get_config().scoring.rating_max

    for definition in definitions:
        console.print(f"\n[bold blue]{definition.title}[/bold blue] ({definition.id.value})")
        console.print(f"[dim]{definition.description}[/dim]\n")

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Category")
        table.add_column("Question")
        table.add_column("Answer")

        for q in definition.questions:
            if q.kind == QuestionKind.SCALED_RATING:
                answer = f"rating {RATING_MIN}-{rating_max}"
            else:
                answer = "\n".join(f"{i}. {opt}" for i, opt in enumerate(q.options, 1))
            table.add_row(q.id, q.category or "", q.prompt, answer)

        console.print(table)


@main.command("status")
@click.pass_obj
def status_cmd(state: CliState):
    """Show progress through the assessment."""
    engine = state.engine
    session = engine.get_session()

    if session.is_completed:
        headline = "[green]Completed[/green] - run 'ml-readiness report' to see your results"
    else:
        current = session.sections[session.current_section_index]
        headline = (
            f"Section {session.current_section_index + 1} of {len(session.sections)}: "
            f"[bold cyan]{current.title}[/bold cyan]"
        )

    console.print(Panel(
        f"{headline}\nProgress: {engine.progress_percent()}%",
        title="Assessment Status",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Section")
    table.add_column("Answered", justify="right")
    table.add_column("Completed")
    table.add_column("Score", justify="right")

    for i, section in enumerate(session.sections, 1):
        total = len(get_section_definition(section.id).questions)
        score = section.get_score()
        table.add_row(
            str(i),
            section.title,
            f"{len(section.responses)}/{total}",
            "[green]✓[/green]" if section.completed else "",
            f"{score}%" if score is not None else "-",
        )

    console.print(table)


@main.command("answer")
@click.argument("section", type=section_choice())
@click.argument("question_id")
@click.argument("value")
@click.pass_obj
def answer_cmd(state: CliState, section: str, question_id: str, value: str):
    """Record an answer: a rating, an option's text, or its number.

    Examples:
        ml-readiness answer psychometric interest_1 4
        ml-readiness answer technical ml_2 TensorFlow
        ml-readiness answer technical logic_1 2
    """
    try:
        question = get_question(section, question_id)
        parsed = parse_answer(question, value)
        state.engine.record_response(section, question_id, parsed)
        console.print(f"[green]✓ {question_id}: {parsed}[/green]")
    except AssessmentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("complete")
@click.argument("section", type=section_choice())
@click.pass_obj
def complete_cmd(state: CliState, section: str):
    """Score a fully answered section."""
    try:
        score = state.engine.complete_section(section)
        console.print(f"[green]✓ {get_section_definition(section).title} completed: {score}%[/green]")
    except AssessmentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("next")
@click.pass_obj
def next_cmd(state: CliState):
    """Go to the next section (finishes the assessment from the last one)."""
    session = state.engine.advance()
    if session.is_completed:
        console.print("[green]Assessment completed.[/green]")
        display_results(session.results, state.engine.wiscar_dimension_scores())
    else:
        console.print(f"Now on: [bold cyan]{session.sections[session.current_section_index].title}[/bold cyan]")


@main.command("back")
@click.pass_obj
def back_cmd(state: CliState):
    """Go back to the previous section."""
    session = state.engine.retreat()
    console.print(f"Now on: [bold cyan]{session.sections[session.current_section_index].title}[/bold cyan]")


@main.command("finish")
@click.pass_obj
def finish_cmd(state: CliState):
    """Finish the assessment and synthesize the results."""
    try:
        session = state.engine.finish()
        display_results(session.results, state.engine.wiscar_dimension_scores())
    except AssessmentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("reset")
@click.confirmation_option(prompt="Discard all answers and start over?")
@click.pass_obj
def reset_cmd(state: CliState):
    """Start the assessment over."""
    state.engine.reset()
    console.print("[green]Assessment reset.[/green]")


@main.command("take")
@click.option(
    "--section",
    type=section_choice(),
    help="Only answer this section (does not move between sections)"
)
@click.pass_obj
def take_cmd(state: CliState, section: Optional[str]):
    """Take the assessment interactively, starting from the current section."""
    engine = state.engine

    if engine.is_completed:
        console.print("[yellow]The assessment is already completed.[/yellow]")
        console.print("[dim]Run 'ml-readiness reset' to take it again.[/dim]")
        display_results(engine.results, engine.wiscar_dimension_scores())
        return

    try:
        if section:
            run_section(engine, SectionId(section))
            return

        while not engine.is_completed:
            current = engine.current_section()
            run_section(engine, current.id)
            engine.advance()
    except click.Abort:
        console.print("\n[yellow]Paused. Your answers are saved; run 'take' again to continue.[/yellow]")
        return
    except AssessmentError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    display_results(engine.results, engine.wiscar_dimension_scores())


@main.command("report")
@click.option(
    "--out", "-o",
    type=click.Path(dir_okay=False),
    help="Also save the results as JSON to this file"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.pass_obj
def report_cmd(state: CliState, out: Optional[str], json_output: bool):
    """Show the results of a completed assessment."""
    engine = state.engine
    results = engine.results
    if results is None:
        console.print("[yellow]The assessment is not completed yet.[/yellow]")
        sys.exit(1)

    if json_output:
        click.echo(results.model_dump_json(indent=2))
    else:
        display_results(results, engine.wiscar_dimension_scores())

    if out:
        Path(out).write_text(results.model_dump_json(indent=2), encoding="utf-8")
        if not json_output:
            console.print(f"\n[green]Results saved to {out}[/green]")


@main.command("init-config")
@click.argument("path", type=click.Path(dir_okay=False), default="readiness-config.yaml")
def init_config_cmd(path: str):
    """Write the default configuration to PATH."""
    save_default_config(Path(path))
    console.print(f"[green]Default configuration written to {path}[/green]")


def parse_answer(question: QuestionDefinition, raw: str):
    """Turn command-line text into a response value for the question.

    Ratings become ints. Choices accept the exact option text first, then a
    1-based option number.
    """
    raw = raw.strip()
    if question.kind == QuestionKind.SCALED_RATING:
        try:
            return int(raw)
        except ValueError:
            rating_max = get_config().scoring.rating_max
            raise InvalidResponseError(
                question.id, raw, f"expected an integer rating {RATING_MIN}-{rating_max}"
            ) from None

    if raw in question.options:
        return raw
    if raw.isdigit() and 1 <= int(raw) <= len(question.options):
        return question.options[int(raw) - 1]
    return raw


def run_section(engine: AssessmentEngine, section_id: SectionId) -> None:
    """Prompt for every question of a section, then complete it."""
    definition = get_section_definition(section_id)
    existing = engine.get_session().get_section(section_id).responses

    console.print(f"\n[bold yellow]━━━ {definition.title} ━━━[/bold yellow]")
    console.print(f"[dim]{definition.description}[/dim]\n")

    rating_max = engine.scorer.constants.rating_max
    total = len(definition.questions)
    for i, q in enumerate(definition.questions, 1):
        previous = existing.get(q.id)
        console.print(f"[bold cyan]{i}/{total}. {q.prompt}[/bold cyan]")
        if q.category:
            console.print(f"   [dim]{q.category}[/dim]")

        if q.kind == QuestionKind.SCALED_RATING:
            default = previous.value if previous else (RATING_MIN + rating_max) // 2
            value = click.prompt(
                f"   Rate {RATING_MIN} (strongly disagree) to {rating_max} (strongly agree)",
                type=click.IntRange(RATING_MIN, rating_max),
                default=default,
            )
        else:
            for idx, opt in enumerate(q.options, 1):
                marker = "→" if previous and previous.value == opt else " "
                console.print(f"   {marker} [bold]{idx}[/bold]. {opt}")
            default_num = q.options.index(previous.value) + 1 if previous else None
            choice = click.prompt(
                f"   Select [1-{len(q.options)}]",
                type=click.IntRange(1, len(q.options)),
                default=default_num,
            )
            value = q.options[choice - 1]

        engine.record_response(section_id, q.id, value)
        console.print()

    score = engine.complete_section(section_id)
    console.print(f"[green]✓ Section score: {score}%[/green]")
    if section_id == SectionId.WISCAR:
        display_wiscar_breakdown(engine.wiscar_dimension_scores())


def display_wiscar_breakdown(dimension_scores: dict[str, int]) -> None:
    tree = Tree("[bold]WISCAR Dimensions[/bold]")
    for dimension in WISCAR_DIMENSIONS:
        tree.add(f"{dimension.title}: [bold]{dimension_scores.get(dimension.id, 0)}%[/bold]")
    console.print(tree)


def display_results(results: Optional[AssessmentResults], dimension_scores: Optional[dict[str, int]] = None):
    """Display the assessment report."""
    if results is None:
        return

    copy = describe_recommendation(results.recommendation)
    color = RECOMMENDATION_COLORS[results.recommendation]

    console.print(Panel(
        f"[bold]{copy.headline}[/bold]\n\n"
        f"{copy.summary}\n\n"
        f"Overall Confidence Score: [{color}]{results.confidence_score}%[/{color}]\n"
        f"[{color}]{copy.badge}[/{color}]",
        title="Your ML Engineering Readiness",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Area")
    table.add_column("Score", justify="right")
    table.add_column("Measures", style="dim")
    table.add_row("Psychometric Fit", f"{results.psychometric_fit}%", "Personality and interest alignment")
    table.add_row("Technical Readiness", f"{results.technical_readiness}%", "Programming and ML knowledge")
    table.add_row("WISCAR Score", f"{results.wiscar_score}%", "Career fit and learning potential")
    console.print(table)

    if dimension_scores:
        display_wiscar_breakdown(dimension_scores)

    console.print("\n[bold]Next Steps:[/bold]")
    for i, step in enumerate(results.next_steps, 1):
        console.print(f"  [bold]{i}.[/bold] {step}")

    console.print("\n[bold]Career Paths to Explore:[/bold]")
    for path in results.career_paths:
        console.print(f"  [green]•[/green] {path}")

    console.print(
        "\n[dim]These results are indicative and meant to guide your learning journey.[/dim]"
    )


if __name__ == "__main__":
    main()
