"""Interactive CLI application."""
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from kokushi_tutor.corpus import (
    DEFAULT_CORPUS_PATH, DEFAULT_EXPLANATIONS_PATH, CorpusError, get_explanation,
    load_corpus, load_explanations,
)
from kokushi_tutor.dashboard import (
    daily_progress_percent, get_accuracy_color, get_accuracy_label, get_study_stats,
    get_year_breakdown,
)
from kokushi_tutor.db import DEFAULT_DB_PATH
from kokushi_tutor.feed import order_questions
from kokushi_tutor.grading import format_ordering_answer, question_type, sorted_choices
from kokushi_tutor.models import FilterSpec, FolderRef, Keyword, TabRef
from kokushi_tutor.session import StudySession
from kokushi_tutor.stores import BOOKMARK_FOLDER_ID
from kokushi_tutor.subjects import SUBJECT_CATEGORIES, get_subject_by_id

console = Console()

EXIT_WORDS = ("q", "menu")
RESULTS_SHOWN = 20


class SessionExitRequested(Exception):
    """The user asked to leave the current run and return to the menu."""


def session_prompt(text: str, **kwargs) -> str:
    answer = Prompt.ask(text, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def parse_int_list(text: str) -> frozenset:
    """"112, 113 114" -> {112, 113, 114}. Non-numeric tokens are ignored."""
    tokens = text.replace(",", " ").split()
    return frozenset(int(t) for t in tokens if t.isdigit())


def parse_session_list(text: str) -> frozenset:
    return frozenset(c for c in text.upper() if c in "ABCD")


def show_welcome(session: StudySession):
    meta = session.corpus.meta
    console.print(Panel(
        "[bold]歯科医師国家試験 過去問[/bold]\n"
        f"[dim]{meta.year_min}〜{meta.year_max}回 / {meta.total_count:,}問[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("search", "Search by question id or keywords"),
        ("study", "Random practice"),
        ("dashboard", "Streak, daily goal + progress"),
        ("favorites", "Practice favorite questions"),
        ("folders", "Browse and manage folders"),
        ("flashcards", "Flashcard drill"),
        ("tabs", "Subject tabs"),
        ("history", "Recent searches"),
        ("goal", "Set daily goal"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def render_results(questions: list, limit: int = RESULTS_SHOWN) -> None:
    table = Table(title=f"{len(questions)} questions")
    table.add_column("ID", style="cyan")
    table.add_column("Question")
    table.add_column("Fig", justify="center")
    for q in questions[:limit]:
        text = q.question_text if len(q.question_text) <= 60 else q.question_text[:59] + "…"
        table.add_row(q.id, text, "*" if q.has_figure else "")
    console.print(table)
    if len(questions) > limit:
        console.print(f"[dim]… and {len(questions) - limit} more[/dim]")


def show_question(q, index: int, total: int) -> None:
    header = f"{q.year}-{q.session}-{q.number}"
    if q.choice_count > 1:
        header += f"  (choose {q.choice_count})"
    console.print(Panel(q.question_text, title=f"Q{index}/{total}  {header}", border_style="cyan"))
    if q.images:
        console.print(f"[dim]Figures: {', '.join(q.images)}[/dim]")
    for key, text in sorted_choices(q):
        console.print(f"  [cyan]{key})[/cyan] {text}")


def show_correct_answer(q, explanations: dict) -> None:
    kind = question_type(q)
    if kind == "ordering":
        console.print(f"Answer: [green]{format_ordering_answer(q)}[/green]")
    else:
        console.print(f"Answer: [green]{q.answer}[/green]")
    explanation = get_explanation(explanations, q.id)
    if explanation and explanation.points:
        console.print(f"[dim]{explanation.points}[/dim]")


def run_study_session(session: StudySession, questions: list, explanations: dict | None = None) -> tuple[int, int]:
    """Ask each question in turn. Returns (correct, graded)."""
    explanations = explanations or {}
    if not questions:
        console.print("[yellow]No questions to study![/yellow]")
        return 0, 0
    correct = graded = 0
    try:
        for i, q in enumerate(questions, 1):
            show_question(q, i, len(questions))
            kind = question_type(q)
            hint = {"calculation": "value, e.g. 12.5", "ordering": "sequence, e.g. bcdae"}.get(kind, "letters, e.g. ac")
            answer = session_prompt(f"\nYour answer ({hint})")
            if kind == "normal":
                selected = {c for c in answer.lower() if c in q.choices}
            else:
                selected = answer.strip()
            if q.is_excluded:
                console.print("[yellow]This question was excluded from scoring.[/yellow]")
            elif not selected:
                console.print("[yellow]No answer given, not graded.[/yellow]")
                show_correct_answer(q, explanations)
            else:
                graded += 1
                if session.answer_question(q, selected):
                    console.print("[green]Correct![/green]")
                    correct += 1
                else:
                    console.print("[red]Incorrect.[/red]")
                show_correct_answer(q, explanations)
            action = session_prompt(
                "[dim]Enter=next  f=favorite  b=bookmark  c=flashcard[/dim]", default="",
            ).strip().lower()
            if action == "f":
                added = session.toggle_favorite(q.id)
                console.print("[magenta]Added to favorites[/magenta]" if added else "[dim]Removed from favorites[/dim]")
            elif action == "b":
                session.add_to_folder(BOOKMARK_FOLDER_ID, q.id)
                console.print("[magenta]Bookmarked[/magenta]")
            elif action == "c":
                session.add_flashcard(q.id)
                console.print("[magenta]Added to flashcards[/magenta]")
            console.print()
    finally:
        if graded:
            console.print(f"[bold]Score: {correct}/{graded} ({correct / graded * 100:.0f}%)[/bold]\n")
    return correct, graded


def offer_study(session: StudySession, questions: list, explanations: dict) -> None:
    if questions and Confirm.ask("Study these questions?", default=False):
        count = max(IntPrompt.ask("How many", default=min(len(questions), 10)), 0)
        run_study_session(session, questions[:count], explanations)


def cmd_search(session: StudySession, explanations: dict, text: str | None = None):
    if text is None:
        text = Prompt.ask("Search (e.g. 112-B-48, 112B, 11, or keywords)", default="")
        years = parse_int_list(Prompt.ask("Years (blank = all)", default=""))
        sessions = parse_session_list(Prompt.ask("Sessions A-D (blank = all)", default=""))
        core_only = Confirm.ask("Core-topic questions only?", default=False)
    else:
        years, sessions, core_only = frozenset(), frozenset(), False
    spec = FilterSpec(search_text=text, selected_years=years, sessions=sessions, core_topic_only=core_only)
    order = Prompt.ask("Order", choices=["newest", "random"], default="newest")
    results = session.search(spec, order=order)
    render_results(results)
    offer_study(session, results, explanations)


def cmd_study(session: StudySession, explanations: dict):
    count = max(IntPrompt.ask("Number of questions", default=session.progress.daily_goal), 0)
    questions = session.load_feed(Keyword(), order="random")[:count]
    run_study_session(session, questions, explanations)


def cmd_dashboard(session: StudySession):
    stats = get_study_stats(session.progress, session.questions, session.clock())
    percent = daily_progress_percent(session.progress, session.clock())
    color = get_accuracy_color(stats["total_accuracy"])
    label = get_accuracy_label(stats["total_accuracy"])

    console.print(Panel(
        f"[bold]🔥 {stats['current_streak']} day streak[/bold]  (best {stats['longest_streak']})",
        title="Study Dashboard", border_style="blue",
    ))
    bar_filled = int(percent / 5)
    bar = f"[green]{'█' * bar_filled}[/green]{'░' * (20 - bar_filled)}"
    console.print(f"\n  Today: [bold]{stats['today_answered']}/{stats['daily_goal']}[/bold] {bar}"
                  f"  accuracy {stats['today_accuracy']}%")
    if stats["goal_reached"]:
        console.print("  [green]Daily goal reached![/green]")
    console.print(f"  Total: [bold]{stats['total_answered']}[/bold] answered, "
                  f"[{color}]{stats['total_accuracy']}% {label}[/{color}]  |  "
                  f"Seen {stats['questions_seen']} questions ({stats['coverage']}%)\n")

    table = Table(title="Coverage by Sitting")
    table.add_column("Sitting", justify="right")
    table.add_column("Answered", justify="right")
    table.add_column("Coverage", justify="right")
    for row in get_year_breakdown(session.progress, session.questions):
        table.add_row(f"{row['year']}回", f"{row['answered']}/{row['total']}", f"{row['coverage']}%")
    console.print(table)


def _questions_for_ids(session: StudySession, ids: list) -> list:
    return [q for q in (session.corpus.find(i) for i in ids) if q is not None]


def cmd_favorites(session: StudySession, explanations: dict):
    questions = _questions_for_ids(session, session.favorites.ids)
    if not questions:
        console.print("[yellow]No favorites yet. Press 'f' after answering a question.[/yellow]")
        return
    render_results(questions)
    offer_study(session, questions, explanations)


def cmd_flashcards(session: StudySession, explanations: dict):
    questions = order_questions(_questions_for_ids(session, session.flashcards.ids), "random")
    run_study_session(session, questions, explanations)


def cmd_folders(session: StudySession, explanations: dict):
    table = Table(title="Folders")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Questions", justify="right")
    for i, folder in enumerate(session.folders.folders, 1):
        table.add_row(str(i), folder.name, str(len(folder.question_ids)))
    console.print(table)
    action = Prompt.ask("Action", choices=["open", "new", "rename", "delete", "back"], default="open")
    if action == "back":
        return
    if action == "new":
        folder_id = session.create_folder(Prompt.ask("Folder name"))
        console.print(f"[green]Created {session.folders.get(folder_id).name}[/green]")
        return
    if not session.folders.folders:
        console.print("[yellow]No folders.[/yellow]")
        return
    choices = [str(i) for i in range(1, len(session.folders.folders) + 1)]
    folder = session.folders.folders[IntPrompt.ask("Folder", choices=choices) - 1]
    if action == "open":
        questions = session.load_feed(FolderRef(folder.id))
        render_results(questions)
        offer_study(session, questions, explanations)
    elif action == "rename":
        session.rename_folder(folder.id, Prompt.ask("New name", default=folder.name))
    elif action == "delete":
        if Confirm.ask(f"Delete {folder.name}?", default=False):
            session.delete_folder(folder.id)


def cmd_tabs(session: StudySession, explanations: dict):
    for i, tab in enumerate(session.tabs.tabs, 1):
        names = ", ".join(get_subject_by_id(s).display_name for s in tab.subject_ids if get_subject_by_id(s))
        console.print(f"  [cyan]{i}[/cyan]) {tab.name} [dim]{names}[/dim]")
    action = Prompt.ask("Action", choices=["open", "new", "delete", "back"], default="new" if not session.tabs.tabs else "open")
    if action == "back":
        return
    if action == "new":
        for category, subjects in SUBJECT_CATEGORIES.items():
            console.print(f"[bold]{category}[/bold]: " + "  ".join(s.id for s in subjects))
        subject_ids = [s for s in Prompt.ask("Subject ids (space separated)").split() if get_subject_by_id(s)]
        if not subject_ids:
            console.print("[red]No known subjects given.[/red]")
            return
        session.add_tab(Prompt.ask("Tab name"), subject_ids)
        return
    if not session.tabs.tabs:
        console.print("[yellow]No tabs.[/yellow]")
        return
    choices = [str(i) for i in range(1, len(session.tabs.tabs) + 1)]
    tab = session.tabs.tabs[IntPrompt.ask("Tab", choices=choices) - 1]
    if action == "open":
        questions = session.load_feed(TabRef(tab.id))
        render_results(questions)
        offer_study(session, questions, explanations)
    elif action == "delete":
        session.remove_tab(tab.id)


def cmd_history(session: StudySession, explanations: dict):
    if not session.history.entries:
        console.print("[yellow]No searches yet.[/yellow]")
        return
    for i, entry in enumerate(session.history.entries, 1):
        console.print(f"  [cyan]{i}[/cyan]) {entry}")
    choice = Prompt.ask("Number to search again, 'clear', or Enter", default="")
    if choice == "clear":
        session.clear_history()
    elif choice.isdigit() and 1 <= int(choice) <= len(session.history.entries):
        cmd_search(session, explanations, text=session.history.entries[int(choice) - 1])


def cmd_goal(session: StudySession):
    goal = IntPrompt.ask("Questions per day", default=session.progress.daily_goal)
    try:
        session.set_daily_goal(goal)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return
    console.print(f"[green]Daily goal set to {goal}.[/green]")


def setup_logging() -> None:
    level = os.environ.get("KOKUSHI_TUTOR_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    if not Path(DEFAULT_CORPUS_PATH).exists():
        console.print(f"[red]Question file not found: {DEFAULT_CORPUS_PATH}[/red]")
        console.print("[dim]Set KOKUSHI_TUTOR_CORPUS to the merged questions.json.[/dim]")
        sys.exit(1)
    try:
        corpus = load_corpus(DEFAULT_CORPUS_PATH)
        explanations = load_explanations(DEFAULT_EXPLANATIONS_PATH)
    except (CorpusError, ValueError) as e:
        console.print(f"[red]Could not load questions: {e}[/red]")
        sys.exit(1)

    with StudySession(DEFAULT_DB_PATH, corpus) as session:
        show_welcome(session)
        while True:
            show_menu()
            choice = Prompt.ask("\n[bold]>[/bold]", default="study").strip().lower()
            try:
                if choice == "search":
                    cmd_search(session, explanations)
                elif choice == "study":
                    cmd_study(session, explanations)
                elif choice == "dashboard":
                    cmd_dashboard(session)
                elif choice == "favorites":
                    cmd_favorites(session, explanations)
                elif choice == "folders":
                    cmd_folders(session, explanations)
                elif choice == "flashcards":
                    cmd_flashcards(session, explanations)
                elif choice == "tabs":
                    cmd_tabs(session, explanations)
                elif choice == "history":
                    cmd_history(session, explanations)
                elif choice == "goal":
                    cmd_goal(session)
                elif choice in ("quit", "exit", "q"):
                    console.print("[dim]Good luck on your exam![/dim]")
                    break
                else:
                    console.print("[red]Unknown command. Try again.[/red]")
            except SessionExitRequested:
                console.print("[dim]Back to menu.[/dim]")
            except KeyboardInterrupt:
                console.print("\n[dim]Use 'quit' to exit.[/dim]")
            except Exception as e:
                console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
