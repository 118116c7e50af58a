"""File names of the artifacts shared between the judge and the runners."""

from pathlib import Path

EFFECTIVE_PROMPT_FILE = "effective-prompt.md"
TASK_FILE = "task.md"
RUN_REPORT_FILE = "arena-run.json"
EVALUATION_FILE = "evaluation.md"


def variation_file(output_dir: Path, variation_number: int) -> Path:
    return output_dir / f"variation-{variation_number}.md"


def run_dir(output_dir: Path, variation_number: int) -> Path:
    return output_dir / f"run-{variation_number}"
