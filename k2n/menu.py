"""
Interactive menu shown when k2n runs without a subcommand on a terminal.

Collects gen settings with rich prompts and turns them into the equivalent
command line, which main() then parses like any other.
"""

import os
import shlex

from rich.prompt import Confirm, Prompt

from .config import ENV_MODEL, ENV_PROVIDER
from .llm.models import DEFAULT_PROVIDER, PROVIDERS
from .utils import console, print_settings_table

# (answer key, gen flag, prompt text)
TEXT_FIELDS = [
    ("usecase", "--usecase", "Use case (e.g. terraform, crossplane claim)"),
    ("instruction", "--instruction", "Instruction for the AI"),
    ("example_files", "--example-files", "Example files (comma-separated)"),
    ("examples_dirs", "--examples-dirs", "Example directories (comma-separated)"),
    ("ruleset_env_files", "--ruleset-env-files", "Environment ruleset files (comma-separated)"),
    ("ruleset_usecase_files", "--ruleset-usecase-files", "Use case ruleset files (comma-separated)"),
    ("destination", "--destination", "Destination (empty for stdout, a file, or a dir/)"),
]


def answers_to_argv(answers: dict) -> list[str]:
    """
    Convert menu answers to gen arguments.

    Empty text answers are left out so flag/env/default precedence applies.
    """
    argv = ["gen"]
    for key, flag, _ in TEXT_FIELDS:
        value = (answers.get(key) or "").strip()
        if value:
            argv.extend([flag, value])

    if answers.get("ai_provider"):
        argv.extend(["--ai-provider", answers["ai_provider"]])
    if answers.get("ai_model"):
        argv.extend(["--ai-model", answers["ai_model"]])
    if answers.get("verbose"):
        argv.append("--verbose")
    if not answers.get("prompt_to_ai", True):
        argv.append("--no-prompt-to-ai")
    return argv


def ask_gen_settings(environ=None) -> dict:
    """Ask for each gen setting in turn."""
    environ = os.environ if environ is None else environ
    answers = {}

    console.print("\n[bold cyan]Basic configuration[/bold cyan]")
    for key, _, text in TEXT_FIELDS:
        answers[key] = Prompt.ask(text, default="", show_default=False, console=console)

    console.print("\n[bold cyan]AI provider[/bold cyan]")
    answers["ai_provider"] = Prompt.ask(
        "Provider",
        choices=list(PROVIDERS),
        default=environ.get(ENV_PROVIDER) or DEFAULT_PROVIDER,
        console=console,
    )
    answers["ai_model"] = Prompt.ask(
        "Model (empty for the provider default)",
        default=environ.get(ENV_MODEL, ""),
        show_default=bool(environ.get(ENV_MODEL)),
        console=console,
    )
    answers["verbose"] = Confirm.ask("Verbose output?", default=False, console=console)
    answers["prompt_to_ai"] = Confirm.ask("Send the prompt to the AI?", default=True, console=console)
    return answers


def run_menu(environ=None) -> list[str] | None:
    """
    Show the main menu.

    Returns:
        Arguments to run, ["--help"] for help, or None to exit.
    """
    choice = Prompt.ask(
        "[bold]k2n - AI-based code generation[/bold]\nWhat would you like to do?",
        choices=["gen", "help", "exit"],
        default="gen",
        console=console,
    )
    if choice == "exit":
        console.print("\nGoodbye!")
        return None
    if choice == "help":
        return ["--help"]

    answers = ask_gen_settings(environ)
    argv = answers_to_argv(answers)

    console.print()
    print_settings_table({k: str(v) if not isinstance(v, bool) else str(v).lower() for k, v in answers.items()},
                         title="Selected settings")
    console.print(f"\n[bold]Equivalent command:[/bold] k2n {shlex.join(argv)}")

    if not Confirm.ask("Run now?", default=True, console=console):
        console.print("[bold red]Cancelled[/bold red]")
        return None
    return argv
