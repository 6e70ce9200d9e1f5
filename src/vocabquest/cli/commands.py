"""CLI commands for vocabquest.

Commands:
- init: Create the database and load the bundled content
- scenes / vocab / ruby: Browse content
- learner-create / learners / learner-delete: Manage learners
- study: Interactive flashcard or quiz session for one scene
- progress: Show a learner's progress
- serve: Run the Web API
"""

import sqlite3

import typer
from rich.console import Console
from rich.table import Table

from vocabquest.config import get_db_path, load_app_config
from vocabquest.core.models import Learner, VocabularyEntry
from vocabquest.core.quiz import QuizQuestion, QuizType, is_placeholder
from vocabquest.core.ruby import accessibility_text, parse_ruby, reading_text
from vocabquest.core.sample_data import SeedError, SeedResult, seed_database
from vocabquest.core.session import SessionMode, StudySession
from vocabquest.core.stores import LearnerStore, SceneStore, VocabularyStore
from vocabquest.db import init_db, learner_repository, scene_repository, vocabulary_repository

app = typer.Typer(
    name="quest",
    help="Scene-based Japanese vocabulary study for young learners.",
    no_args_is_help=True,
)

console = Console()


def _open_db() -> SeedResult:
    """Create the schema if needed and seed empty tables."""
    try:
        init_db()
        return seed_database()
    except (sqlite3.Error, SeedError) as e:
        console.print(f"[red]✗ Database error: {e}[/red]")
        raise typer.Exit(code=1)


def _select_learner_or_exit(store: LearnerStore, learner_id: str | None) -> Learner | None:
    """Select the given learner, or the most recent one when no ID is given."""
    learner = store.fetch_current() if learner_id is None else store.select(learner_id)
    if store.last_error:
        console.print(f"[red]✗ {store.last_error}[/red]")
        raise typer.Exit(code=1)

    if learner is None and learner_id is not None:
        console.print(f"[red]✗ Learner not found: {learner_id}[/red]")
        raise typer.Exit(code=1)
    return learner


def _ruby(text: str) -> str:
    """Inline rendering of ruby markup for the terminal."""
    return accessibility_text(parse_ruby(text))


# =============================================================================
# CONTENT COMMANDS
# =============================================================================


@app.command()
def init() -> None:
    """Create the database and load the bundled vocabulary and scenes."""
    result = _open_db()

    console.print(f"[green]✓ Database ready: {get_db_path()}[/green]")
    if result.seeded:
        console.print(f"  Vocabulary inserted: {result.vocabulary_inserted}")
        console.print(f"  Scenes inserted: {result.scenes_inserted}")
    else:
        console.print("[dim]  Content already loaded[/dim]")


@app.command()
def scenes() -> None:
    """List scenes in study order."""
    _open_db()

    store = SceneStore()
    items = store.fetch_all()
    if store.last_error:
        console.print(f"[yellow]⚠ {store.last_error} (showing default scenes)[/yellow]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Scene")
    table.add_column("Category")
    table.add_column("Words", justify="right")
    for scene in items:
        table.add_row(
            str(scene.order),
            f"{scene.title} [dim]{scene.title_en or ''}[/dim]",
            scene.category.display_name,
            str(len(scene.vocabulary_ids)),
        )
    console.print(table)


@app.command()
def vocab(
    category: str | None = typer.Option(
        None, "--category", "-c", help="Vocabulary category (e.g. 教室)"
    ),
) -> None:
    """List vocabulary entries."""
    _open_db()

    store = VocabularyStore()
    entries = store.fetch_by_category(category) if category else store.fetch_all()
    if store.last_error:
        console.print(f"[red]✗ {store.last_error}[/red]")
        raise typer.Exit(code=1)

    if not entries:
        console.print("[yellow]No vocabulary found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Word")
    table.add_column("Reading")
    table.add_column("Meaning")
    table.add_column("Category")
    table.add_column("Lv", justify="right")
    for entry in entries:
        table.add_row(
            entry.word,
            entry.reading,
            entry.meaning_en or entry.meaning,
            entry.category,
            str(entry.difficulty),
        )
    console.print(table)
    console.print(f"[dim]{len(entries)} entries[/dim]")


@app.command()
def ruby(
    text: str = typer.Argument(..., help="Text with ｜base《reading》 markup"),
) -> None:
    """Parse ruby markup and show its segments."""
    segments = parse_ruby(text)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Text")
    table.add_column("Ruby")
    for segment in segments:
        table.add_row(segment.text, segment.ruby)
    console.print(table)

    console.print(f"Plain:   {''.join(s.text for s in segments)}")
    console.print(f"Reading: {reading_text(segments)}")
    console.print(f"Spoken:  {accessibility_text(segments)}")


# =============================================================================
# LEARNER COMMANDS
# =============================================================================


@app.command(name="learner-create")
def learner_create(
    name: str = typer.Argument(..., help="Learner name"),
) -> None:
    """Create a learner."""
    _open_db()

    name = name.strip()
    if not name:
        console.print("[red]✗ Name must not be blank[/red]")
        raise typer.Exit(code=1)
    if learner_repository.get_learner_by_name(name) is not None:
        console.print(f"[red]✗ Learner already exists: {name}[/red]")
        raise typer.Exit(code=1)

    store = LearnerStore()
    learner = store.create(name)
    if store.last_error:
        console.print(f"[red]✗ Could not save learner: {store.last_error}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Learner created: {learner.name}[/green]")
    console.print(f"  ID: {learner.learner_id}")


@app.command()
def learners() -> None:
    """List learners."""
    _open_db()

    store = LearnerStore()
    items = store.fetch_all()
    if store.last_error:
        console.print(f"[red]✗ {store.last_error}[/red]")
        raise typer.Exit(code=1)

    if not items:
        console.print("[yellow]No learners yet. Create one with 'quest learner-create NAME'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Level", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Mastered", justify="right")
    for learner in items:
        table.add_row(
            learner.learner_id,
            learner.name,
            str(learner.level),
            str(learner.total_points),
            str(learner.mastered_count),
        )
    console.print(table)


@app.command(name="learner-delete")
def learner_delete(
    learner_id: str = typer.Argument(..., help="Learner ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a learner and all of its progress."""
    _open_db()

    learner = learner_repository.get_learner_by_id(learner_id)
    if learner is None:
        console.print(f"[red]✗ Learner not found: {learner_id}[/red]")
        raise typer.Exit(code=1)

    if not yes:
        confirm = typer.confirm(
            f"Delete {learner.name} and {learner_repository.count_progress_rows(learner_id)} progress records?"
        )
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(code=0)

    store = LearnerStore()
    if not store.delete(learner_id):
        console.print(f"[red]✗ Could not delete learner: {store.last_error}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Deleted: {learner.name}[/green]")


# =============================================================================
# STUDY COMMAND - Interactive session
# =============================================================================


def _choice_label(choice: VocabularyEntry, quiz_type: QuizType) -> str:
    if is_placeholder(choice) or quiz_type is QuizType.IMAGE_TO_WORD:
        return _ruby(choice.ruby_text)
    return choice.meaning_en or choice.meaning


def _ask_choice(question: QuizQuestion) -> int:
    """Ask a quiz question and loop until valid input (0..k-1)."""
    n_options = len(question.choices)
    entry = question.vocabulary

    console.print(f"[bold]{question.quiz_type.prompt}[/bold]")
    if question.quiz_type is QuizType.IMAGE_TO_WORD:
        console.print(f"  🖼  {entry.meaning_en or entry.meaning}")
    else:
        console.print(f"  {_ruby(entry.ruby_text)}")

    while True:
        for idx, choice in enumerate(question.choices):
            console.print(f"  {idx}. {_choice_label(choice, question.quiz_type)}")

        raw = typer.prompt(f"Choose (0-{n_options - 1})")
        try:
            choice = int(raw.strip())
            if 0 <= choice < n_options:
                return choice
            console.print(f"[yellow]⚠ Must be 0-{n_options - 1}[/yellow]")
        except ValueError:
            console.print("[yellow]⚠ Enter a number[/yellow]")


def _ask_flashcard(entry: VocabularyEntry) -> str:
    """Show a card and ask for its reading or meaning."""
    console.print(f"[bold]{entry.word}[/bold]")
    while True:
        raw = typer.prompt("Reading or meaning").strip()
        if raw:
            return raw
        console.print("[yellow]⚠ Answer must not be empty[/yellow]")


@app.command()
def study(
    scene_order: int = typer.Argument(..., help="Scene number (see 'quest scenes')"),
    quiz: bool = typer.Option(False, "--quiz", "-q", help="Multiple-choice quiz mode"),
    learner_id: str | None = typer.Option(
        None, "--learner", "-l", help="Learner ID (default: most recent learner)"
    ),
) -> None:
    """Study the vocabulary of one scene."""
    _open_db()

    scene = scene_repository.get_scene_by_order(scene_order)
    if scene is None:
        console.print(f"[red]✗ Scene not found: {scene_order}[/red]")
        raise typer.Exit(code=1)

    learner_store = LearnerStore()
    learner = _select_learner_or_exit(learner_store, learner_id)
    if learner is None:
        console.print("[dim]No learner selected; answers will not be saved[/dim]")

    vocabulary_store = VocabularyStore()
    entries = vocabulary_store.fetch_for_scene(scene)
    if vocabulary_store.last_error:
        console.print(f"[red]✗ {vocabulary_store.last_error}[/red]")
        raise typer.Exit(code=1)
    if not entries:
        console.print("[yellow]No vocabulary for this scene[/yellow]")
        return

    config = load_app_config()
    session = StudySession(
        entries,
        scene=scene,
        mode=SessionMode.QUIZ if quiz else SessionMode.FLASHCARD,
        num_choices=config.quiz.num_choices,
        placeholder_word=config.quiz.placeholder_word,
        points_per_correct=config.points.session_points_per_correct,
    )

    console.print(f"\n[bold]{_ruby(scene.ruby_title)}[/bold]")
    console.print(f"[dim]{_ruby(scene.story_content)}[/dim]")

    while not session.is_completed:
        entry = session.current_vocabulary
        console.print(
            f"\n[blue]Card {session.current_index + 1}/{len(session.vocabularies)}[/blue]"
        )

        if session.mode is SessionMode.QUIZ:
            is_correct = session.select_choice(_ask_choice(session.current_question))
        else:
            is_correct = session.submit_answer(_ask_flashcard(entry))

        if is_correct:
            console.print("[green]✓ Correct![/green]")
        else:
            console.print("[red]✗ Not quite[/red]")
        console.print(f"  {_ruby(entry.ruby_text)}  {entry.meaning}")

        if learner is not None:
            answer = learner_store.record_answer(entry.vocabulary_id, is_correct)
            if learner_store.last_error:
                console.print(f"[yellow]⚠ Progress not saved: {learner_store.last_error}[/yellow]")
            elif answer is not None:
                console.print(f"[dim]  Mastery {answer.mastery_level}/3[/dim]")

        session.next()

    console.print("\n[bold]Session complete[/bold]")
    console.print(f"  Correct: {session.correct_count}/{session.total_count}")
    console.print(f"  Accuracy: {session.accuracy_rate:.0%}")
    console.print(f"  Points earned: {session.points_earned}")
    if learner is not None:
        console.print(f"  {learner.name}: {learner.total_points} total points")


@app.command()
def progress(
    learner_id: str | None = typer.Option(
        None, "--learner", "-l", help="Learner ID (default: most recent learner)"
    ),
) -> None:
    """Show a learner's level and per-word progress."""
    _open_db()

    learner = _select_learner_or_exit(LearnerStore(), learner_id)
    if learner is None:
        console.print("[red]✗ No learners yet[/red]")
        raise typer.Exit(code=1)

    points_per_level = load_app_config().points.points_per_level
    console.print(f"[bold]{learner.name}[/bold]  Level {learner.level}")
    console.print(
        f"  Points: {learner.total_points} "
        f"({learner.points_to_next_level(points_per_level)} to next level, "
        f"{learner.level_progress(points_per_level):.0%})"
    )
    console.print(f"  Mastered: {learner.mastered_count}")

    if not learner.progress:
        console.print("[dim]No answers recorded yet[/dim]")
        return

    words = {
        e.vocabulary_id: e
        for e in vocabulary_repository.get_vocabulary_by_ids(list(learner.progress))
    }

    table = Table(show_header=True, header_style="bold")
    table.add_column("Word")
    table.add_column("Mastery", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    for vocabulary_id, record in sorted(learner.progress.items()):
        entry = words.get(vocabulary_id)
        table.add_row(
            entry.word if entry else vocabulary_id,
            "★" * record.mastery_level + "☆" * (3 - record.mastery_level),
            f"{record.correct_answers}/{record.total_answers}",
            f"{record.accuracy_rate:.0%}",
        )
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    uvicorn.run("vocabquest.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
