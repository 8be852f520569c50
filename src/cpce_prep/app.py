"""Interactive CLI application."""
import logging
import time

from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from cpce_prep.config import get_settings
from cpce_prep.dashboard import get_dashboard, get_score_color, is_passing
from cpce_prep.db import init_db
from cpce_prep.exam_config import CONTENT_AREAS, EXAM, QUIZ_MODES, get_content_area
from cpce_prep.exceptions import TutorError
from cpce_prep.flashcards import get_flashcards
from cpce_prep.logging_setup import setup_logging
from cpce_prep.quiz import (
    get_practice_questions, get_quizplus_questions, get_section_questions,
    get_simulation_questions,
)
from cpce_prep.review import browse_questions, get_weak_domains
from cpce_prep.seed import is_seeded, seed_all
from cpce_prep.sessions import (
    complete_quiz_session, create_quiz_session, delete_quiz_session,
    get_recent_sessions, submit_answer,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """User asked to leave the current quiz or drill."""


def session_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> str:
    if choices is not None:
        choices = list(choices) + [w for w in EXIT_WORDS if w not in choices]
    answer = Prompt.ask(prompt, choices=choices, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> int:
    return int(session_prompt(prompt, choices=choices, **kwargs))


def show_welcome():
    console.print(Panel(
        f"[bold]{EXAM['exam']}[/bold]\n[dim]{EXAM['full_name']}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("practice", QUIZ_MODES["practice"]["description"]),
        ("section", QUIZ_MODES["section"]["description"]),
        ("simulation", QUIZ_MODES["simulation"]["description"]),
        ("quizplus", QUIZ_MODES["quizplus"]["description"]),
        ("flashcards", "Flashcard drill"),
        ("review", "Browse the question bank and weak areas"),
        ("dashboard", "Progress and domain scores"),
        ("history", "Recent sessions (delete one)"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_question(index: int, total: int, question: dict) -> None:
    area = get_content_area(question["domain"])
    console.print(f"[bold]Q{index}/{total}.[/bold] [dim]{area.short_name if area else question['domain']}[/dim]")
    console.print(f"{question['question_text']}\n")
    for option in question["options"]:
        console.print(f"  [cyan]{option['label']})[/cyan] {option['text']}")


def show_results(result: dict) -> None:
    score = result["score"]
    color = get_score_color(score)
    headline = "Great Work!" if is_passing(score) else "Keep Practicing!"
    console.print(Panel(
        f"[bold {color}]{score:.0f}%[/bold {color}]  "
        f"{result['correct_count']}/{result['total_questions']} correct",
        title=headline, border_style=color,
    ))
    if not result["by_domain"]:
        return
    table = Table(title="By Content Area")
    table.add_column("Content Area", style="cyan")
    table.add_column("Correct", justify="right")
    table.add_column("Score", justify="right")
    for domain, counts in result["by_domain"].items():
        area = get_content_area(domain)
        table.add_row(
            area.short_name if area else domain,
            f"{counts['correct']}/{counts['attempted']}",
            f"[{get_score_color(counts['percentage'])}]{counts['percentage']:.0f}%[/]",
        )
    console.print(table)


def run_quiz_session(
    db_path: str,
    user_id: str,
    mode: str,
    questions: list,
    section_filter: str | None = None,
    time_limit: int | None = None,
) -> dict | None:
    """Ask each question, record answers, and complete the session.

    Timed sessions hold feedback until the end and stop asking once the time
    limit has passed. Returns None for an empty batch. Leaving early raises
    SessionExitRequested and leaves the session open.
    """
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return None
    session_id = create_quiz_session(db_path, user_id, mode, [q["id"] for q in questions], section_filter)
    started = time.monotonic()
    console.print(f"\n[bold]{QUIZ_MODES[mode]['name']}[/bold] - {len(questions)} questions\n")
    for i, q in enumerate(questions, 1):
        if time_limit is not None and time.monotonic() - started >= time_limit:
            console.print("[yellow]Time is up.[/yellow]")
            break
        show_question(i, len(questions), q)
        asked = time.monotonic()
        answer = session_prompt("\nYour answer", choices=["a", "b", "c", "d"])
        feedback = submit_answer(db_path, session_id, q["id"], answer, int(time.monotonic() - asked))
        if time_limit is None:
            if feedback["is_correct"]:
                console.print("[green]Correct![/green]")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{feedback['correct_answer']}[/green]")
            if feedback["explanation"]:
                console.print(f"[dim]{feedback['explanation']}[/dim]")
        console.print()
    result = complete_quiz_session(db_path, session_id, int(time.monotonic() - started))
    show_results(result)
    return result


def run_flashcard_session(cards: list) -> None:
    if not cards:
        console.print("[yellow]No flashcards available![/yellow]")
        return
    console.print(f"\n[bold]Flashcards[/bold] - {len(cards)} cards\n")
    for i, card in enumerate(cards, 1):
        console.print(Panel(card["front"], title=f"Card {i}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="")
        console.print(Panel(f"{card['correct_answer']}) {card['back']}", border_style="green"))
        if card["explanation"]:
            console.print(f"[dim]{card['explanation']}[/dim]")
        console.print()


def choose_content_area() -> str:
    for i, area in enumerate(CONTENT_AREAS, 1):
        console.print(f"  [cyan]{i}[/cyan]) {area.name}")
    choice = IntPrompt.ask("Select content area", choices=[str(i) for i in range(1, len(CONTENT_AREAS) + 1)])
    return CONTENT_AREAS[choice - 1].id


def cmd_practice(db_path: str, user_id: str):
    count = IntPrompt.ask("Number of questions", default=QUIZ_MODES["practice"]["default_question_count"])
    run_quiz_session(db_path, user_id, "practice", get_practice_questions(db_path, count))


def cmd_section(db_path: str, user_id: str):
    domain = choose_content_area()
    count = IntPrompt.ask("Number of questions", default=QUIZ_MODES["section"]["default_question_count"])
    questions = get_section_questions(db_path, domain, count)
    run_quiz_session(db_path, user_id, "section", questions, section_filter=domain)


def cmd_simulation(db_path: str, user_id: str):
    console.print(Panel(
        f"{EXAM['total_questions']} questions, {EXAM['time_limit_minutes']} minutes. "
        "Answers are revealed at the end.",
        title=QUIZ_MODES["simulation"]["name"],
    ))
    run_quiz_session(
        db_path, user_id, "simulation", get_simulation_questions(db_path),
        time_limit=EXAM["time_limit_seconds"],
    )


def cmd_quizplus(db_path: str, user_id: str):
    count = IntPrompt.ask("Number of questions", default=QUIZ_MODES["quizplus"]["default_question_count"])
    run_quiz_session(db_path, user_id, "quizplus", get_quizplus_questions(db_path, count))


def cmd_flashcards(db_path: str, user_id: str):
    mode = Prompt.ask("Cards from", choices=["all", "area"], default="all")
    domain = choose_content_area() if mode == "area" else None
    run_flashcard_session(get_flashcards(db_path, domain=domain, count=15))


def cmd_review(db_path: str, user_id: str):
    weak = get_weak_domains(db_path, user_id)
    if weak:
        table = Table(title="Weak Content Areas")
        table.add_column("Content Area")
        table.add_column("Score", justify="right")
        table.add_column("Attempted", justify="right")
        for w in weak:
            table.add_row(w["domain_name"], f"{w['score']}%", str(w["attempted"]))
        console.print(table)

    search = Prompt.ask("Search question text (blank for all)", default="")
    page = 1
    while True:
        data = browse_questions(db_path, search=search or None, page=page, limit=5)
        for q in data["questions"]:
            console.print(f"\n[bold]{q['chapter']} #{q['question_number']}[/bold] {q['question_text']}")
            for option in q["options"]:
                marker = "[green]>[/green]" if option["label"] == q["correct_answer"] else " "
                console.print(f" {marker} {option['label']}) {option['text']}")
            if q["explanation"]:
                console.print(f"   [dim]{q['explanation']}[/dim]")
        pages = data["pagination"]
        console.print(f"\n[dim]Page {pages['page']} of {max(pages['total_pages'], 1)} "
                      f"({pages['total_count']} questions)[/dim]")
        if page >= pages["total_pages"]:
            break
        if Prompt.ask("Next page?", choices=["y", "n"], default="y") != "y":
            break
        page += 1


def cmd_dashboard(db_path: str, user_id: str):
    data = get_dashboard(db_path, user_id)
    accuracy = data["overall_accuracy"]
    color = get_score_color(accuracy)
    console.print(Panel(
        f"Questions answered: [bold]{data['total_questions_answered']}[/bold]  |  "
        f"Accuracy: [{color}]{accuracy}%[/{color}]  |  Streak: [bold]{data['streak']}[/bold] days",
        title="Dashboard", border_style="blue",
    ))

    table = Table(title="Content Areas")
    table.add_column("Content Area", style="cyan")
    table.add_column("Correct", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for ds in data["domain_scores"]:
        sc_color = get_score_color(ds["score"]) if ds["attempted"] else "dim"
        table.add_row(
            ds["short_name"],
            f"{ds['correct']}/{ds['attempted']}",
            f"{ds['score']}%",
            f"[{sc_color}]{ds['label']}[/{sc_color}]",
        )
    console.print(table)

    attempted = [ds for ds in data["domain_scores"] if ds["attempted"]]
    if attempted:
        weakest = min(attempted, key=lambda d: d["score"])
        if weakest["score"] < 70:
            console.print(f"\n  [yellow]Recommendation: Focus on {weakest['name']}[/yellow]")


def cmd_history(db_path: str, user_id: str):
    sessions = get_recent_sessions(db_path, user_id)
    if not sessions:
        console.print("[yellow]No sessions yet.[/yellow]")
        return
    table = Table(title="Recent Sessions")
    table.add_column("ID", justify="right")
    table.add_column("Mode")
    table.add_column("Started")
    table.add_column("Answered", justify="right")
    table.add_column("Score", justify="right")
    for s in sessions:
        score = f"{s['score']}%" if s["completed_at"] else "[dim]open[/dim]"
        table.add_row(str(s["id"]), QUIZ_MODES[s["mode"]]["name"], s["started_at"][:16],
                      f"{s['answer_count']}/{s['total_questions']}", score)
    console.print(table)
    choice = Prompt.ask("Session ID to delete (blank to keep all)", default="")
    if choice.strip():
        delete_quiz_session(db_path, int(choice), user_id)
        console.print(f"[green]Deleted session {choice}.[/green]")


COMMANDS = {
    "practice": cmd_practice,
    "section": cmd_section,
    "simulation": cmd_simulation,
    "quizplus": cmd_quizplus,
    "flashcards": cmd_flashcards,
    "review": cmd_review,
    "dashboard": cmd_dashboard,
    "history": cmd_history,
}


def main():
    settings = get_settings()
    setup_logging(settings)
    db_path = settings.db_path
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path, settings.questions_file)
    if first_run:
        console.print("[green]Ready![/green]\n")

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="practice").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Good luck on your exam![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path, settings.user_id)
        except SessionExitRequested:
            console.print("[dim]Back to menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except TutorError as e:
            console.print(f"[red]{e.message}[/red]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
