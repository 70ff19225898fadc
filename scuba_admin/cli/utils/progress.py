"""Progress tracking utilities for CLI."""

from typing import Callable, List, Optional

import click


class ProgressTracker:
    """Track progress through the stages of a multi-step command.

    Attributes:
        stages: List of stage names
        total_stages: Total number of stages
        current_stage: Current stage index (0-based)
    """

    def __init__(self, stages: List[str]):
        self.stages = stages
        self.total_stages = len(stages)
        self.current_stage = 0

    def advance(self, message: Optional[str] = None):
        """Advance to the next stage, optionally echoing a detail line."""
        if message:
            click.echo(f"  {message}")
        self.current_stage += 1

    def get_current_message(self) -> str:
        """Current stage with a ``[n/total]`` prefix."""
        if self.current_stage < self.total_stages:
            stage_name = self.stages[self.current_stage]
            return f"[{self.current_stage + 1}/{self.total_stages}] {stage_name}"
        return f"[{self.total_stages}/{self.total_stages}] Complete"

    def is_complete(self) -> bool:
        return self.current_stage >= self.total_stages


def create_progress_bar(length: int, label: str = "Processing"):
    """Create a Click progress bar.

    Args:
        length: Total number of items to process
        label: Label to display with the progress bar

    Returns:
        Click progress bar context manager
    """
    return click.progressbar(length=length, label=label, show_pos=True)


def bar_callback(bar) -> Callable[[int, int], None]:
    """Adapt a click progress bar to a ``(current, total)`` callback."""
    state = {"done": 0}

    def callback(current: int, total: int) -> None:
        bar.update(current - state["done"])
        state["done"] = current

    return callback
