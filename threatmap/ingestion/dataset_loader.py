"""Dataset Loader - Load and normalize the named attribution datasets from disk."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, ClassVar

import structlog

from ..concepts.node_details import NodeDetailsIndex
from ..config import DATA_DIR, GEO_DATASET_FILE, NODE_DETAILS_FILE, SECTOR_DATASET_FILE
from ..graph.models import IngestionError
from ..graph.node_splitter import DEFAULT_POLICY, NormalizationPolicy
from ..graph.normalizer import NormalizationResult, normalize

logger = structlog.get_logger()


@dataclass
class LoadedDataset:
    """A normalized dataset and where it came from."""

    name: str
    file_path: Path
    result: NormalizationResult
    loaded_at: datetime


class DatasetLoader:
    """Load the "sector" and "geo" graphs from a data directory.

    Sector graphs only link sponsors and actors to industry sectors, so they
    are shape-normalized without role splitting. Geo graphs link countries
    that can be both sponsor and victim, so they get the full split.
    """

    DATASET_FILES: ClassVar[dict[str, str]] = {
        "sector": SECTOR_DATASET_FILE,
        "geo": GEO_DATASET_FILE,
    }

    DATASET_POLICIES: ClassVar[dict[str, NormalizationPolicy]] = {
        "sector": NormalizationPolicy(
            ambiguous_route=DEFAULT_POLICY.ambiguous_route,
            split_conflicting_roles=False,
            sponsor_suffix=DEFAULT_POLICY.sponsor_suffix,
            victim_suffix=DEFAULT_POLICY.victim_suffix,
        ),
        "geo": DEFAULT_POLICY,
    }

    def __init__(self, data_dir: Path | str = DATA_DIR):
        self.data_dir = Path(data_dir)

    @property
    def dataset_names(self) -> list[str]:
        return list(self.DATASET_FILES)

    def dataset_path(self, name: str) -> Path:
        if name not in self.DATASET_FILES:
            raise KeyError(f"Unknown dataset: {name!r} (expected one of {self.dataset_names})")
        return self.data_dir / self.DATASET_FILES[name]

    def policy_for(self, name: str) -> NormalizationPolicy:
        return self.DATASET_POLICIES.get(name, DEFAULT_POLICY)

    def load(self, name: str, policy: NormalizationPolicy | None = None) -> LoadedDataset:
        """Read and normalize one named dataset.

        Raises:
            KeyError: if the dataset name is unknown
            FileNotFoundError: if the dataset file does not exist
            IngestionError: if the file is not a valid graph document
        """
        path = self.dataset_path(name)
        logger.info("loading_dataset", dataset=name, path=str(path))

        raw = read_json(path)
        result = normalize(raw, policy or self.policy_for(name))
        return LoadedDataset(name=name, file_path=path, result=result, loaded_at=datetime.now(timezone.utc))

    def load_available(self) -> dict[str, LoadedDataset]:
        """Load every dataset that is present and valid, skipping the rest."""
        datasets: dict[str, LoadedDataset] = {}
        for name in self.dataset_names:
            try:
                datasets[name] = self.load(name)
            except FileNotFoundError:
                logger.warning("dataset_not_found", dataset=name, path=str(self.dataset_path(name)))
            except IngestionError as e:
                logger.warning("dataset_ingestion_failed", dataset=name, error=str(e))
        return datasets

    def load_details(self) -> NodeDetailsIndex:
        """Load the node details document. A missing file yields an empty index."""
        path = self.data_dir / NODE_DETAILS_FILE
        if not path.exists():
            logger.warning("node_details_not_found", path=str(path))
            return NodeDetailsIndex()
        return NodeDetailsIndex.from_file(path)


def read_json(path: Path | str) -> Any:
    """Read a JSON document, reporting parse failures as IngestionError."""
    path = Path(path)
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise IngestionError(f"Invalid JSON in {path}: {e}") from e
