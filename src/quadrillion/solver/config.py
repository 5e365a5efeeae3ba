"""Quadrillion solver configuration."""

from dotenv import find_dotenv
from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from quadrillion.solver.search import REPORT_INTERVAL

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the Quadrillion solver."""

    pieces_path: str = "pieces.txt"
    """Piece definitions file (12 pieces, 16 bits each).  Default: pieces.txt."""

    boards_path: str = "boards.txt"
    """Boards file, used when no path is given on the command line.  Default: boards.txt."""

    log_dir: str = "logs"
    """Directory for run logs.  Default: logs."""

    report_interval: PositiveInt = REPORT_INTERVAL
    """Interval (in expanded search states) at which to report progress."""

    node_limit: PositiveInt | None = None
    """Abort a board after expanding this many search states.  If None (default), no limit."""

    breadth_first: bool = False
    """Expand search states first-in-first-out instead of depth-first.  Default: False."""

    print_solutions: bool = False
    """Whether to print every solution, not just the count.  Default: False."""

    deterministic: bool = True
    """Print solutions sorted by their text rendering (a bit slower).  Default: True."""

    validate_solutions: bool = False
    """Check every solution against the input board and catalog.  Default: False."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
