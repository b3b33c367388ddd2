from .dataset_loader import DatasetLoader, LoadedDataset, read_json

__all__ = [
    "DatasetLoader",
    "LoadedDataset",
    "read_json",
]
