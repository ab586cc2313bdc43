"""
Prompt builder for configuration generation.

The prompt is plain text: a role line, output formatting rules, optional
ruleset sections, numbered examples and the instruction.
"""

FORMAT_RULES = """Output formatting rules:
- If you generate more than one file, separate the files with a line containing only ---
- Write the file name on its own line immediately before the file content.
- Use the .yaml extension for YAML content.
- Do not wrap the output in markdown code fences (```)."""


def default_instruction(usecase: str) -> str:
    """Instruction used when the caller does not provide one."""
    return f"Generate a {usecase} configuration. Only return one file definition, no description."


def build_prompt(
    examples: list[str],
    env_rules: list[str],
    usecase_rules: list[str],
    technology: str,
    instruction: str,
    include_format_rules: bool = True,
) -> str:
    """
    Build the generation prompt.

    Args:
        examples: Example file contents, in the order they should be numbered.
        env_rules: Environment ruleset entries.
        usecase_rules: Use case ruleset entries.
        technology: Label for the role line ("technology" when empty).
        instruction: Final instruction, included verbatim.
        include_format_rules: Add the multi-file formatting rules.

    Returns:
        Prompt string for the LLM.
    """
    parts = [f"You are a {technology or 'technology'} expert.\n\n"]

    if include_format_rules:
        parts.append(FORMAT_RULES + "\n\n")

    if env_rules:
        parts.append("Environment Rules:\n")
        parts.extend(f"{rule}\n---\n" for rule in env_rules)
        parts.append("\n")

    if usecase_rules:
        parts.append("Use Case Rules:\n")
        parts.extend(f"{rule}\n---\n" for rule in usecase_rules)
        parts.append("\n")

    parts.append("Examples:\n")
    for i, example in enumerate(examples, 1):
        parts.append(f"Example {i}:\n{example}\n\n")

    parts.append(f"Instruction:\n{instruction}\n")

    return "".join(parts)
