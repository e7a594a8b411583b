"""Command-line interface for the article companion."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from article_companion.app.bootstrap import load_runtime_from_path
from article_companion.chat import MODE_REGISTRY, ChatMode, Message, Role, SessionController
from article_companion.chat.view import LOADING_LABEL
from article_companion.config import DEFAULT_CONFIG_PATH, CompanionConfig
from article_companion.diagnostics import run_diagnostics
from article_companion.utils.time import format_clock

console = Console()

_BOX_CHARSETS = {
    "simple": {"tl": "┌", "tr": "┐", "bl": "└", "br": "┘", "h": "─", "v": "│"},
    "rounded": {"tl": "╭", "tr": "╮", "bl": "╰", "br": "╯", "h": "─", "v": "│"},
}

_MODE_SHORTCUTS = {
    "1": ChatMode.DIRECT,
    "2": ChatMode.REAL_WORLD,
    "3": ChatMode.EXPERIMENT,
}

_STATUS_STYLES = {"ok": "green", "warn": "yellow", "error": "red"}


def render_assistant_message(
    content: str,
    *,
    title: str = "Assistant",
    boxed: bool = True,
    box_style: str = "simple",
) -> None:
    """Render assistant message with optional boxing that adapts to terminal width."""
    markdown = Markdown(content)
    if boxed:
        if not console.is_terminal:
            _render_boxed_fallback(content, box_style, title)
            return
        box_styles = {
            "simple": box.SIMPLE,
            "rounded": box.ROUNDED,
        }
        chosen_box = box_styles.get(box_style.lower(), box.SIMPLE)
        console.print(
            Panel(
                markdown,
                title=title,
                border_style="blue",
                box=chosen_box,
                expand=True,
                padding=(0, 1),
            )
        )
    else:
        console.rule(title)
        console.print(markdown)


def _render_boxed_fallback(content: str, box_style: str, title: str) -> None:
    """Render a unicode box manually when Rich falls back to plain text output."""
    glyphs = _BOX_CHARSETS.get(box_style.lower(), _BOX_CHARSETS["simple"])
    lines = content.splitlines() or [""]
    available_width = max(20, console.width or 80)
    label = f" {title} "
    max_line = max(len(line) for line in [*lines, label.strip()])
    inner_width = min(available_width - 2, max_line + 4)
    inner_width = max(inner_width, len(label), 6)
    content_width = max(1, inner_width - 2)

    wrapped_lines: list[str] = []
    for raw_line in lines:
        remaining = raw_line.rstrip()
        if not remaining:
            wrapped_lines.append("")
        while remaining:
            wrapped_lines.append(remaining[:content_width])
            remaining = remaining[content_width:]

    render_lines = [f"{glyphs['tl']}{label.center(inner_width, glyphs['h'])}{glyphs['tr']}"]
    for wrapped in wrapped_lines:
        render_lines.append(f"{glyphs['v']} {wrapped.ljust(content_width)} {glyphs['v']}")
    render_lines.append(f"{glyphs['bl']}{glyphs['h'] * inner_width}{glyphs['br']}")

    console.print(Text("\n".join(render_lines)))


def render_message(message: Message, *, boxed: bool, box_style: str) -> None:
    stamp = format_clock(message.timestamp)
    if message.role is Role.USER:
        console.print(f"[green]You[/] [dim]{stamp}[/dim]: {message.content}")
        return
    render_assistant_message(message.content, title=f"Assistant {stamp}", boxed=boxed, box_style=box_style)


def list_modes() -> str:
    lines = [
        f"{idx}. {mode.value}: {MODE_REGISTRY[mode].title} - {MODE_REGISTRY[mode].description}"
        for idx, mode in _MODE_SHORTCUTS.items()
    ]
    return "\n".join(lines)


def parse_mode_choice(user_input: str) -> ChatMode | None:
    """Map ``1``/``2``/``3`` or a mode name to a mode; ``None`` when unrecognised."""
    value = (user_input or "").strip().lower()
    if value in _MODE_SHORTCUTS:
        return _MODE_SHORTCUTS[value]
    for mode in ChatMode:
        if value in {mode.value, mode.name.lower(), MODE_REGISTRY[mode].title.lower()}:
            return mode
    return None


def handle_cli_command(
    command: str,
    *,
    controller: SessionController,
    mode_ref: dict[str, Any],
) -> bool:
    lowered = command.strip().lower()
    if lowered == ":help":
        _print_help_menu()
        return True
    if lowered == ":history":
        _render_history(controller, mode_ref)
        return True
    if lowered == ":back":
        controller.back()
        console.print("[cyan]Back to mode selection.[/cyan]\n")
        return True
    if lowered.startswith(":box"):
        _toggle_boolean_setting(command, mode_ref, "boxed", "Boxed answers")
        return True
    return False


def _print_help_menu() -> None:
    console.print(
        "Commands:\n"
        "  :back           - Return to mode selection (clears the transcript)\n"
        "  :history        - Show the transcript for the current mode\n"
        "  :box on/off     - Toggle boxed rendering for answers\n"
        "  :help           - Show this menu\n"
        "  :exit           - Close the companion"
    )


def _toggle_boolean_setting(command: str, mode_ref: dict[str, Any], key: str, label: str) -> None:
    parts = command.split()
    if len(parts) == 2 and parts[1].lower() in {"on", "off"}:
        mode_ref[key] = parts[1].lower() == "on"
        state = "enabled" if mode_ref[key] else "disabled"
        console.print(f"[cyan]{label} {state}.[/cyan]")
    else:
        console.print(f"[yellow]Usage: {parts[0]} on|off[/yellow]")


def _render_history(controller: SessionController, mode_ref: dict[str, Any]) -> None:
    view = controller.view()
    if view.selecting_mode:
        console.print("[yellow]No mode selected yet.[/yellow]\n")
        return
    console.print(f"[bold]{view.title} ({len(view.history)} messages)[/bold]\n")
    for message in view.history:
        render_message(message, **_render_options(mode_ref))


def _render_options(mode_ref: dict[str, Any]) -> dict[str, Any]:
    return {"boxed": bool(mode_ref.get("boxed", True)), "box_style": str(mode_ref.get("box_style", "simple"))}


def _prompt_for_mode() -> ChatMode | None:
    console.print("[bold]Choose Your Chat Mode[/bold]")
    console.print("Select how you'd like to interact with the article")
    console.print(list_modes())
    while True:
        answer = Prompt.ask("[bold cyan]Mode[/]", console=console)
        if answer.strip().lower() in {":exit", ":quit"}:
            return None
        chosen = parse_mode_choice(answer)
        if chosen is not None:
            return chosen
        console.print("[yellow]Enter 1, 2, 3 or a mode name (or :exit).[/yellow]")


def run_turn(controller: SessionController, text: str, mode_ref: dict[str, Any]) -> list[Message]:
    """Apply one user turn and return the messages it added to the transcript."""
    baseline = len(controller.history)
    controller.update_draft(text)
    with console.status(LOADING_LABEL):
        controller.send(controller.draft_input)
    added = controller.history[baseline:]
    for message in added:
        if message.role is Role.ASSISTANT:
            render_message(message, **_render_options(mode_ref))
    return added


@click.group()
def cli() -> None:
    """Article Companion CLI."""


@cli.command()
@click.option("--article", "article_path", type=click.Path(path_type=Path, exists=True, dir_okay=False), required=True)
@click.option("--title", type=str, default=None, help="Override the title read from the article file.")
@click.option("--mode", type=click.Choice([mode.value for mode in ChatMode]), default=None)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=DEFAULT_CONFIG_PATH)
def chat(article_path: Path, title: str | None, mode: str | None, config_path: Path) -> None:
    """Open the companion next to an article and start chatting."""
    runtime = load_runtime_from_path(config_path, article_path, title=title)
    controller = runtime.controller
    ui_settings = runtime.ui_settings
    mode_ref: dict[str, Any] = {
        "boxed": bool(ui_settings.get("boxed_answers", True)),
        "box_style": str(ui_settings.get("box_style", "simple")),
    }

    controller.open()
    console.print(f"[bold magenta]Article Companion[/] - [cyan]{runtime.article.title}[/]")
    console.print("Type ':help' for available commands.\n")

    preselected = ChatMode(mode) if mode else None
    while controller.is_open:
        if controller.mode is None:
            chosen = preselected or _prompt_for_mode()
            preselected = None
            if chosen is None:
                break
            controller.select(chosen)
            view = controller.view()
            console.rule(view.title)
            for message in view.history:
                render_message(message, **_render_options(mode_ref))
            continue

        user_input = Prompt.ask("[bold green]You[/]", console=console)
        stripped = user_input.strip()
        if not stripped:
            continue
        if stripped.lower() in {":exit", ":quit"}:
            break
        if handle_cli_command(stripped, controller=controller, mode_ref=mode_ref):
            continue

        view = controller.view()
        if not (view.input_visible and view.input_enabled):
            console.print(f"[dim]{view.placeholder} Use :back to choose another mode.[/dim]")
            continue
        run_turn(controller, user_input, mode_ref)

    controller.close()
    console.print("[cyan]Closing the companion.[/]")


@cli.command()
def modes() -> None:
    """List the available chat modes."""
    console.print(list_modes())


@cli.command()
@click.argument("question")
@click.option("--article", "article_path", type=click.Path(path_type=Path, exists=True, dir_okay=False), required=True)
@click.option("--title", type=str, default=None, help="Override the title read from the article file.")
@click.option("--mode", type=click.Choice([mode.value for mode in ChatMode]), default=ChatMode.DIRECT.value)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=DEFAULT_CONFIG_PATH)
def ask(question: str, article_path: Path, title: str | None, mode: str, config_path: Path) -> None:
    """Ask a single question about an article and print the reply."""
    if not question.strip():
        raise click.UsageError("QUESTION must not be blank.")
    runtime = load_runtime_from_path(config_path, article_path, title=title)
    controller = runtime.controller
    controller.open()
    controller.select(mode)
    mode_ref = {
        "boxed": bool(runtime.ui_settings.get("boxed_answers", True)),
        "box_style": str(runtime.ui_settings.get("box_style", "simple")),
    }
    run_turn(controller, question, mode_ref)
    controller.close()


@cli.command()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=DEFAULT_CONFIG_PATH)
def doctor(config_path: Path) -> None:
    """Check the local environment and backend reachability."""
    results = run_diagnostics(CompanionConfig.from_file(config_path))
    table = Table(title="Diagnostics")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")
    for name, result in results.items():
        style = _STATUS_STYLES.get(result["status"], "white")
        table.add_row(name, f"[{style}]{result['status']}[/{style}]", result["details"])
    console.print(table)


if __name__ == "__main__":  # pragma: no cover
    cli()
