"""Per-generation records of a training run.

Each generation boundary produces a ``GenerationSummary``; a
``GenerationHistory`` collects them and exports to pandas/CSV for offline
analysis.
"""
from dataclasses import asdict, dataclass, fields
from typing import Iterator, List, Optional
import logging
import os

import pandas as pd

logger = logging.getLogger(__name__)

END_LIFESPAN = 'lifespan'
END_INACTIVE = 'inactive'


@dataclass(frozen=True)
class GenerationSummary:
    generation: int
    frames: int
    end_reason: str
    best_fitness: float
    mean_fitness: float
    best_lifetime: int
    targets_reached: int
    active_at_end: int
    population: int


class GenerationHistory:
    """Ordered list of generation summaries."""

    def __init__(self):
        self.records: List[GenerationSummary] = []

    def append(self, summary: GenerationSummary) -> None:
        self.records.append(summary)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[GenerationSummary]:
        return iter(self.records)

    def __getitem__(self, idx) -> GenerationSummary:
        return self.records[idx]

    def best(self) -> Optional[GenerationSummary]:
        """Generation with the highest best fitness, or None when empty."""
        if not self.records:
            return None
        return max(self.records, key=lambda r: r.best_fitness)

    def to_dataframe(self) -> pd.DataFrame:
        columns = [f.name for f in fields(GenerationSummary)]
        return pd.DataFrame([asdict(r) for r in self.records], columns=columns)

    def to_csv(self, path: str) -> str:
        """Write the history to ``path`` and return the path."""
        out_dir = os.path.dirname(os.path.abspath(path))
        os.makedirs(out_dir, exist_ok=True)
        self.to_dataframe().to_csv(path, index=False)
        logger.info('wrote %d generation records to %s', len(self.records), path)
        return path
