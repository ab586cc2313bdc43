#!/usr/bin/env python3
"""
k2n - CLI Entry Point
=====================

Usage:
    python -m k2n gen --examples-dirs examples/ --usecase terraform --instruction "..."
    python -m k2n gen --example-files a.yaml,b.yaml --destination out/
    python -m k2n version
    python -m k2n            (interactive menu)
"""

import argparse
import json
import platform
import sys

from . import __version__
from .config import DEFAULT_EXAMPLE_EXTS, build_gen_config, load_environment
from .errors import K2NError, ProviderError, ProviderTimeoutError
from .llm import DEFAULT_TIMEOUT, PROVIDERS, build_prompt, call_llm, default_instruction
from .loader import (
    deduplicate,
    load_directory,
    load_files,
    load_ruleset_files,
    load_rulesets_if_exists,
)
from .menu import run_menu
from .output import save_output
from .utils import (
    configure_logging,
    console,
    print_banner,
    print_error,
    print_settings_table,
    print_success,
    print_warning,
)


def collect_examples(config) -> list[str]:
    """Load examples from directories then explicit files, deduplicated."""
    examples = []
    for directory in config.examples_dirs:
        examples.extend(load_directory(directory, config.example_exts))

    if config.example_files:
        console.print(f"[dim]Example file paths: {', '.join(config.example_files)}[/dim]")
        examples.extend(load_files(config.example_files, config.example_exts))

    if not examples:
        console.print("No examples provided. Proceeding without examples.")
        return []
    return deduplicate(examples)


def collect_rulesets(config) -> tuple[list[str], list[str]]:
    """Load environment and use case rulesets (directories first, then files)."""
    env_rules = load_rulesets_if_exists(config.ruleset_env_dir)
    env_rules.extend(load_ruleset_files(config.ruleset_env_files))

    usecase_rules = load_rulesets_if_exists(config.ruleset_usecase_dir)
    usecase_rules.extend(load_ruleset_files(config.ruleset_usecase_files))
    return env_rules, usecase_rules


# =============================================================================
# Subcommands
# =============================================================================

def cmd_gen(args) -> int:
    """Gen command - build the prompt, call the AI, route the output."""
    try:
        config = build_gen_config(args)
    except K2NError as e:
        print_error(str(e))
        return 1

    print_banner(__version__)
    print_settings_table(config.flag_settings())
    console.print("\n[bold]AI Configuration:[/bold]")
    print_settings_table(config.provider_settings())

    try:
        examples = collect_examples(config)
        env_rules, usecase_rules = collect_rulesets(config)
    except K2NError as e:
        print_error(str(e))
        return 1

    console.print(
        f"[INFO] {len(examples)} example(s), {len(env_rules)} environment rule(s), "
        f"{len(usecase_rules)} use case rule(s)"
    )

    instruction = config.instruction or default_instruction(config.usecase)
    prompt = build_prompt(
        examples,
        env_rules,
        usecase_rules,
        config.usecase,
        instruction,
        include_format_rules=config.include_format_rules,
    )

    if config.verbose:
        console.rule("Prompt")
        console.print(prompt, markup=False, highlight=False)
        console.rule()

    if not config.prompt_to_ai:
        console.print("[dim]Prompt not sent to the AI (--no-prompt-to-ai).[/dim]")
        return 0

    if not config.instruction:
        print_warning("No instruction provided. Skipping AI call. Use --instruction to prompt the AI.")
        return 0

    provider = config.provider.kind
    try:
        with console.status(f"[bold green]Calling {provider} AI...[/bold green]"):
            result = call_llm(config.provider, prompt)
    except ProviderTimeoutError as e:
        print_error(str(e))
        return 1
    except ProviderError as e:
        print_error(f"Error calling {provider} API: {e}")
        return 1 if config.fail_on_provider_error else 0
    except K2NError as e:
        print_error(str(e))
        return 1

    try:
        written = save_output(config.destination, result, echo=config.echo_files)
    except K2NError as e:
        print_error(str(e))
        return 1

    if written:
        print_success(f"Wrote {len(written)} file(s)")
    return 0


def cmd_version(args) -> int:
    """Version command - print build information."""
    if args.short:
        print(__version__)
        return 0

    info = {
        "version": __version__,
        "python": platform.python_version(),
        "platform": platform.platform(),
    }
    if args.output == "json":
        print(json.dumps(info, indent=2))
    else:
        for key, value in info.items():
            print(f"{key}: {value}")
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="k2n",
        description="k2n - AI based code generation from examples and rulesets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- GEN command ---
    gen_parser = subparsers.add_parser(
        "gen", help="Generate a claim/code configuration using AI based on examples and rulesets"
    )
    gen_parser.add_argument("--examples-dirs", type=str, default="", metavar="DIRS",
                            help="Comma-separated list of directories containing example code files")
    gen_parser.add_argument("--example-files", type=str, default="", metavar="FILES",
                            help="Comma-separated list of example file paths")
    gen_parser.add_argument("--example-file-ext", type=str, default=DEFAULT_EXAMPLE_EXTS, metavar="EXTS",
                            help=f"Comma-separated list of allowed example file extensions (default: {DEFAULT_EXAMPLE_EXTS})")
    gen_parser.add_argument("--ruleset-env-dir", type=str, default="", metavar="DIR",
                            help="Directory containing environment rulesets (optional)")
    gen_parser.add_argument("--ruleset-usecase-dir", type=str, default="", metavar="DIR",
                            help="Directory containing use case rulesets (optional)")
    gen_parser.add_argument("--ruleset-env-files", type=str, default="", metavar="FILES",
                            help="Comma-separated list of environment ruleset files")
    gen_parser.add_argument("--ruleset-usecase-files", type=str, default="", metavar="FILES",
                            help="Comma-separated list of use case ruleset files")
    gen_parser.add_argument("--usecase", type=str, default="",
                            help="Use case context for generation")
    gen_parser.add_argument("--instruction", type=str, default="",
                            help="Specific instruction to guide the AI")
    gen_parser.add_argument("--destination", type=str, default="",
                            help="stdout (default), a file (combined content), or a directory (separate files)")
    gen_parser.add_argument("-v", "--verbose", action="store_true",
                            help="Enable verbose output (prints the prompt and debug logs)")
    gen_parser.add_argument("-p", "--prompt-to-ai", action=argparse.BooleanOptionalAction, default=True,
                            help="Send the prompt to the AI (default: true)")
    gen_parser.add_argument("--ai-provider", type=str, default="",
                            help=f"AI provider: {' or '.join(PROVIDERS)} (default: openrouter, or AI_PROVIDER)")
    gen_parser.add_argument("--ai-model", type=str, default="",
                            help="Model name for the AI provider (or AI_MODEL, which applies to whichever provider is selected)")
    gen_parser.add_argument("--ai-base-url", type=str, default="",
                            help="Base URL for the AI provider API (or AI_BASE_URL, which applies to whichever provider is selected)")
    gen_parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, metavar="SECONDS",
                            help=f"Deadline for the AI call (default: {DEFAULT_TIMEOUT:g})")
    gen_parser.add_argument("--no-format-rules", action="store_true",
                            help="Leave the multi-file formatting rules out of the prompt")
    gen_parser.add_argument("--echo-files", action="store_true",
                            help="With stdout output, print each generated file under a name header")
    gen_parser.add_argument("--fail-on-provider-error", action="store_true",
                            help="Exit non-zero when the AI call fails")
    gen_parser.set_defaults(func=cmd_gen)

    # --- VERSION command ---
    version_parser = subparsers.add_parser("version", help="Print the current build information")
    version_parser.add_argument("-s", "--short", action="store_true",
                                help="Print just the version number")
    version_parser.add_argument("-o", "--output", choices=["yaml", "json"], default="yaml",
                                help="Output format (default: yaml)")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_environment()
    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command is None:
            if not sys.stdin.isatty():
                parser.print_help()
                return 0

            menu_argv = run_menu()
            if menu_argv is None:
                return 0
            if menu_argv == ["--help"]:
                parser.print_help()
                return 0

            args = parser.parse_args(menu_argv)
            configure_logging(args.verbose)

        return args.func(args)

    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
