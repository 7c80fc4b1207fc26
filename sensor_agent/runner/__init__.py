"""Runner - bucle de sondeo y punto de entrada CLI."""

from .poll_loop import CycleOutcome, PollLoop

__all__ = ["CycleOutcome", "PollLoop"]
