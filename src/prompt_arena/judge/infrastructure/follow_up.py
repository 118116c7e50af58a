"""Hand the resumed judge session to the user for an interactive follow-up."""

import subprocess


def build_follow_up_args(
    binary: str, model: str, session_id: str, message: str
) -> list[str]:
    return [binary, "--model", model, "--resume", session_id, message]


def run_follow_up(binary: str, model: str, session_id: str, message: str) -> int:
    """Resume the judge session interactively, inheriting this terminal's stdio.

    Returns the child's exit code once the user leaves the session.
    """
    completed = subprocess.run(
        build_follow_up_args(binary, model, session_id, message), check=False
    )
    return completed.returncode
