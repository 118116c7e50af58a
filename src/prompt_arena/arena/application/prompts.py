"""Messages sent to the judge in each phase of an arena run."""

from pathlib import Path

from prompt_arena.arena.domain.artifacts import TASK_FILE, run_dir, variation_file
from prompt_arena.variation.domain.parser import DEFAULT_STRATEGIES
from prompt_arena.variation.domain.variation import VariationInfo, VariationResult

DESIGN_USER_MESSAGE = "Begin now - write the task and all variation files."
VARIATIONS_ONLY_USER_MESSAGE = "Begin now - write all variation files."

_STRATEGY_GUIDE: dict[str, str] = {
    "PERSONA": "Frame the instructions as the identity and values of an expert.",
    "EXEMPLAR": "Teach through short worked examples of the desired behavior.",
    "CONSTRAINT": "State hard rules and explicit prohibitions.",
    "SOCRATIC": "Pose guiding questions the agent must answer while it works.",
    "CHECKLIST": "Give a verification checklist to tick off before finishing.",
}

_RESTRICTIONS = """\
## Restrictions

DO NOT read, search or analyze the source files of the tool that launched you
(.py, .ts, .js, .toml or any other source files). Work only with the files
named below."""


def _variation_files(output_dir: Path, variations: int) -> str:
    return "\n".join(
        f"- `{variation_file(output_dir, n)}`" for n in range(1, variations + 1)
    )


def _strategy_list() -> str:
    return "\n".join(
        f"{index}. **{name}**: {_STRATEGY_GUIDE[name]}"
        for index, name in enumerate(DEFAULT_STRATEGIES, start=1)
    )


def _json_contract(variations: int) -> str:
    example = ",\n".join(
        f'    {{"number": {n}, "strategy": "STRATEGY", "summary": "one line"}}'
        for n in range(1, min(variations, 2) + 1)
    )
    return f"""\
## Final answer

Finish with a single fenced JSON block listing every variation you wrote:

```json
{{
  "variations": [
{example}
  ]
}}
```"""


def _variation_brief(system_prompt: str, output_dir: Path, variations: int) -> str:
    return f"""\
## The system prompt under evaluation

<system-prompt>
{system_prompt}
</system-prompt>

## Write {variations} system prompt variations

Rewrite the system prompt {variations} times, each with a different strategy.
Every variation must keep the full intent of the original. Use these
strategies first, then invent your own if more are needed:

{_strategy_list()}

Write one markdown file per variation, containing only the rewritten prompt:

{_variation_files(output_dir, variations)}"""


def build_design_prompt(system_prompt: str, variations: int, output_dir: Path) -> str:
    """System prompt for a design turn where the judge also designs the task."""
    return f"""\
You are a SYSTEM PROMPT EFFECTIVENESS EVALUATOR.

You will design an experiment that shows which phrasing of a system prompt
makes a coding agent follow it best.

{_RESTRICTIONS}

## Design a revealing task

Write a coding task to `{output_dir / TASK_FILE}`. The task must:
- be specific enough that the agent produces real code
- be complex enough to expose differences in approach
- naturally surface violations of every aspect of the system prompt, explicit or implied

{_variation_brief(system_prompt, output_dir, variations)}

{_json_contract(variations)}"""


def build_variations_only_prompt(
    system_prompt: str, variations: int, output_dir: Path
) -> str:
    """System prompt for a design turn where the task was supplied by the user."""
    return f"""\
You are a SYSTEM PROMPT EFFECTIVENESS EVALUATOR.

The task for this experiment is already written to `{output_dir / TASK_FILE}`.
Read it so your variations are relevant, but DO NOT change it.

{_RESTRICTIONS}

{_variation_brief(system_prompt, output_dir, variations)}

{_json_contract(variations)}"""


def _result_section(
    info: VariationInfo | None, result: VariationResult, output_dir: Path
) -> str:
    strategy = info.strategy if info is not None else "UNKNOWN"
    summary = info.summary if info is not None else ""
    return f"""\
### Variation {result.variation_number}: {strategy}
Summary: {summary}
Exit code: {result.exit_code}
Working directory: {run_dir(output_dir, result.variation_number)}

<transcript>
{result.output}
</transcript>"""


def _not_run_section(variation_info: list[VariationInfo], ran: set[int]) -> str:
    lines = [
        f"- Variation {info.number}: {info.strategy} ({info.summary}). Not run."
        for info in sorted(variation_info, key=lambda i: i.number)
        if info.number not in ran
    ]
    if not lines:
        return ""
    listing = "\n".join(lines)
    return f"""

### Variations that did not run

These were designed but produced no transcript. Do not score them.

{listing}"""


def build_evaluation_message(
    system_prompt: str,
    task: str,
    variation_info: list[VariationInfo],
    results: list[VariationResult],
    output_dir: Path,
) -> str:
    """Resume message asking the judge to score every transcript and pick a winner.

    Results are presented in ascending variation order regardless of input order.
    Designed variations without a result are listed as not run.
    """
    info_by_number = {info.number: info for info in variation_info}
    sections = "\n\n".join(
        _result_section(info_by_number.get(result.variation_number), result, output_dir)
        for result in sorted(results, key=lambda r: r.variation_number)
    )
    sections += _not_run_section(
        variation_info, {result.variation_number for result in results}
    )
    return f"""\
Every variation has been run against the task. Variation 0 is the original
system prompt and serves as the baseline.

## Original system prompt

<system-prompt>
{system_prompt}
</system-prompt>

## Task

{task}

## Results

You may inspect each working directory to check the files the agent produced.

{sections}

## Scoring

Score every variation from 0 to 3 on each criterion:

| Criterion | Question |
|-----------|----------|
| System Prompt Adherence | How closely did the agent follow the system prompt? |
| Natural Integration | Did following it look natural rather than forced? |
| Code Quality | How good is the resulting code? |
| Consistency | Would this phrasing work as well on similar tasks? |

## Output format

## Results
One section per variation with its scores and a total out of 12.

## Recommendation
**Winner**: Variation N (STRATEGY)
**Why it worked**: the specific behaviors that made the difference
**Optimized Version**: the improved system prompt in a ```markdown block

Judge effectiveness, not length. When scores tie, prefer the simpler prompt."""


def build_follow_up_message(user_mode: bool) -> str:
    if user_mode:
        return (
            "Would you like me to apply these suggestions to ~/.claude/CLAUDE.md?"
            " I can show you a diff first, make a backup, and apply the changes."
        )
    return (
        "What would you like me to do with these suggestions? I can help you apply"
        " them to your system prompt, explain the reasoning further, or make"
        " adjustments."
    )
