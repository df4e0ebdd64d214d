"""
Runtime configuration for an install invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


DEFAULT_BIN_DIR = Path("/usr/local/bin")
DEFAULT_TIMEOUT = 60.0
DEFAULT_CHUNK_SIZE = 8192
DEFAULT_TEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class InstallerConfig:
    """Settings shared by the pipeline stages."""

    bin_dir: Path = DEFAULT_BIN_DIR
    timeout: float = DEFAULT_TIMEOUT
    test_timeout: float = DEFAULT_TEST_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    show_progress: bool = True
    run_smoke_test: bool = True

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.test_timeout <= 0:
            raise ValueError(f"test timeout must be positive, got {self.test_timeout}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk size must be positive, got {self.chunk_size}")
        object.__setattr__(self, "bin_dir", Path(self.bin_dir).expanduser())
