import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable

from ..analytics import STOP_WORDS, extract_ngrams, kwic
from ..chunking import (
    SegmentationError,
    analyze_heading_levels,
    segment,
    suggest_segmentation,
    suggest_split_level,
)
from ..core.config import Settings
from ..core.ids import IdGenerator, SequentialIdGenerator, make_id_generator
from ..core.logging import log, setup_logging
from ..core.models import Chunk, ColumnRoleConfig, DocumentKind, Granularity, RowStrategy, SourceDocument
from ..ingest import ingest_text, parse_table, suggest_column_roles

app = typer.Typer(add_completion=False, help="Unweaver CLI")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def _init(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.unweaver.yaml auto-discovered)",
    ),
    log_format: str | None = typer.Option(None, "--log-format", help="Log format: json|plain|auto"),
) -> None:
    try:
        settings = Settings.load_config(config_file)
    except ValidationError as e:
        err_console.print(f"[bold red]❌ Invalid settings: {escape(str(e))}[/bold red]")
        raise typer.Exit(1) from e
    setup_logging(log_format or settings.LOG_FORMAT, settings.LOG_LEVEL)
    if settings.NO_COLOR:
        console.no_color = True
        err_console.no_color = True
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return Settings.load_config()


def _id_generator(settings: Settings, seed_ids: bool) -> IdGenerator:
    if seed_ids:
        return SequentialIdGenerator(prefix=settings.ID_PREFIX)
    return make_id_generator(settings.ID_STRATEGY, settings.ID_PREFIX)


def _load_documents(paths: list[Path], id_generator: IdGenerator) -> list[SourceDocument]:
    """Read and ingest files; unreadable input aborts the command."""
    documents = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            err_console.print(f"[bold red]❌ Cannot read {path}: {e}[/bold red]")
            raise typer.Exit(1) from e
        documents.append(ingest_text(path.name, content, id_generator=id_generator))
    return documents


def _parse_granularity(value: str) -> Granularity:
    try:
        return Granularity.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _column_config(
    documents: list[SourceDocument],
    columns_auto: bool,
    target: list[str],
    context: list[str],
    sentiment: list[str],
    strategy: str | None,
) -> ColumnRoleConfig | None:
    if not (columns_auto or target or context or sentiment or strategy):
        return None

    base = ColumnRoleConfig()
    if columns_auto:
        tabular = next((d for d in documents if d.kind == DocumentKind.TABULAR), None)
        if tabular is not None:
            base = suggest_column_roles(parse_table(tabular.content))
    elif not target:
        tabular = next((d for d in documents if d.kind == DocumentKind.TABULAR), None)
        headers = tabular.table_headers or [] if tabular else []
        base = ColumnRoleConfig(target_columns=[h for h in headers if h not in context])

    try:
        row_strategy = RowStrategy(strategy.upper()) if strategy else base.strategy
        return ColumnRoleConfig(
            target_columns=target or base.target_columns,
            context_columns=context or base.context_columns,
            sentiment_context_columns=sentiment or base.sentiment_context_columns,
            strategy=row_strategy,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _segment_files(
    settings: Settings,
    files: list[Path],
    granularity: str | None,
    hierarchical: bool | None,
    level: int | None,
    column_config_args: dict | None = None,
    seed_ids: bool = False,
) -> list[Chunk]:
    id_generator = _id_generator(settings, seed_ids)
    documents = _load_documents(files, id_generator)

    strat = _parse_granularity(granularity or settings.DEFAULT_GRANULARITY)
    is_hierarchical = settings.DEFAULT_HIERARCHICAL if hierarchical is None else hierarchical
    header_level = level or settings.DEFAULT_HEADER_LEVEL
    if header_level is None:
        header_level = suggest_split_level(analyze_heading_levels(documents))

    column_config = _column_config(documents, **column_config_args) if column_config_args else None

    try:
        return segment(
            documents,
            strat,
            column_config=column_config,
            hierarchical=is_hierarchical,
            header_level=header_level,
            id_generator=id_generator,
        )
    except SegmentationError as e:
        raise typer.BadParameter(str(e)) from e


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show effective settings (config file < env vars)."""
    typer.echo(json.dumps(_settings(ctx).model_dump(), indent=2))


@app.command()
def classify(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Files to classify"),
) -> None:
    """Show the detected kind of each input file."""
    settings = _settings(ctx)
    documents = _load_documents(files, _id_generator(settings, seed_ids=True))

    table = RichTable(title="Source Documents")
    table.add_column("Name", style="bold cyan")
    table.add_column("Kind", style="bold green")
    table.add_column("Columns")
    for doc in documents:
        table.add_row(doc.name, doc.kind.value, ", ".join(doc.table_headers or []))
    console.print(table)


@app.command()
def headings(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Markdown or text files"),
) -> None:
    """Count headings per level and show the suggested split level."""
    settings = _settings(ctx)
    documents = _load_documents(files, _id_generator(settings, seed_ids=True))
    index = analyze_heading_levels(documents)

    table = RichTable(title="Heading Levels")
    table.add_column("Level", style="bold cyan", justify="right")
    table.add_column("Headings", style="bold green", justify="right")
    table.add_column("First titles")
    for level, titles in index.items():
        table.add_row(str(level), str(len(titles)), ", ".join(titles[:3]))
    console.print(table)
    typer.echo(f"Suggested split level: {suggest_split_level(index)}")


@app.command()
def suggest(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Files to inspect"),
) -> None:
    """Suggest a segmentation strategy for a set of files."""
    settings = _settings(ctx)
    documents = _load_documents(files, _id_generator(settings, seed_ids=True))
    suggestion = suggest_segmentation(documents)
    typer.echo(
        json.dumps(
            {
                "granularity": suggestion.granularity.value,
                "hierarchical": suggestion.hierarchical,
                "header_level": suggestion.header_level,
                "reasoning": suggestion.reasoning,
            },
            indent=2,
        )
    )


@app.command("segment")
def segment_cmd(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Files to segment"),
    granularity: str | None = typer.Option(None, "--granularity", "-g", help="Splitting strategy"),
    hierarchical: bool | None = typer.Option(
        None, "--hierarchical/--flat", help="Split by headings (or table columns) first"
    ),
    level: int | None = typer.Option(None, "--level", min=1, max=6, help="Heading level for hierarchical splits"),
    columns_auto: bool = typer.Option(False, "--columns-auto", help="Suggest column roles for tables"),
    target: list[str] = typer.Option([], "--target", help="Column to analyze (repeatable)"),
    context: list[str] = typer.Option([], "--context", help="Context column (repeatable)"),
    sentiment: list[str] = typer.Option([], "--sentiment", help="Sentiment context column (repeatable)"),
    strategy: str | None = typer.Option(None, "--strategy", help="Row strategy: COMBINE|DISTINCT"),
    output_format: str = typer.Option("jsonl", "--format", help="Output format: jsonl|text"),
    seed_ids: bool = typer.Option(False, "--seed-ids", help="Deterministic sequential chunk ids"),
) -> None:
    """
    Split files into chunks and write them to stdout.

    Examples:
        unweaver segment notes.md -g paragraph --hierarchical --level 2
        unweaver segment survey.csv --columns-auto --strategy COMBINE
    """
    settings = _settings(ctx)
    chunks = _segment_files(
        settings,
        files,
        granularity,
        hierarchical,
        level,
        column_config_args={
            "columns_auto": columns_auto,
            "target": target,
            "context": context,
            "sentiment": sentiment,
            "strategy": strategy,
        },
        seed_ids=seed_ids,
    )

    if output_format == "jsonl":
        for chunk in chunks:
            typer.echo(json.dumps(chunk.model_dump(mode="json"), ensure_ascii=False))
    elif output_format == "text":
        for chunk in chunks:
            typer.echo(f"--- {chunk.id} [{chunk.source_label}]")
            typer.echo(chunk.text)
    else:
        raise typer.BadParameter(f"Unknown format: {output_format}")

    log.info("cli.segment.done", chunks=len(chunks), files=len(files))


@app.command()
def ngrams(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Files to analyze"),
    granularity: str | None = typer.Option(None, "--granularity", "-g", help="Splitting strategy"),
    top: int | None = typer.Option(None, "--top", min=1, help="Number of n-grams per order"),
) -> None:
    """Show the most frequent bigrams and trigrams."""
    settings = _settings(ctx)
    chunks = _segment_files(settings, files, granularity, None, None)
    result = extract_ngrams(
        chunks,
        stop_words=settings.STOP_WORDS or STOP_WORDS,
        top_n=top or settings.NGRAM_TOP_N,
    )

    for title, grams in (("Bigrams", result.bigrams), ("Trigrams", result.trigrams)):
        table = RichTable(title=title)
        table.add_column("N-gram", style="bold cyan")
        table.add_column("Count", style="bold green", justify="right")
        for gram in grams:
            table.add_row(gram.text, str(gram.count))
        console.print(table)


@app.command("kwic")
def kwic_cmd(
    ctx: typer.Context,
    keyword: str = typer.Argument(..., help="Keyword to search for"),
    files: list[Path] = typer.Argument(..., help="Files to search"),
    granularity: str | None = typer.Option(None, "--granularity", "-g", help="Splitting strategy"),
    window: int | None = typer.Option(None, "--window", min=0, help="Context characters on each side"),
) -> None:
    """Keyword-in-context concordance."""
    settings = _settings(ctx)
    chunks = _segment_files(settings, files, granularity, None, None)
    lines = kwic(chunks, keyword, window=settings.KWIC_WINDOW if window is None else window)

    table = RichTable(title=f"KWIC: {keyword} ({len(lines)} matches)")
    table.add_column("Left", justify="right")
    table.add_column("Keyword", style="bold yellow")
    table.add_column("Right")
    table.add_column("Source", style="dim")
    for line in lines:
        table.add_row(line.left, line.keyword, line.right, line.source_label or "")
    console.print(table)


if __name__ == "__main__":
    app()
