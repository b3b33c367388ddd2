"""FastAPI application serving normalized attribution graphs and analytic queries."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from ..concepts.node_details import NodeDetailsIndex
from ..concepts.sponsor_aliases import SponsorAliasTable
from ..config import DATA_DIR, SPONSOR_ALIAS_FILE
from ..ingestion.dataset_loader import DatasetLoader, LoadedDataset
from ..routing.query_evaluator import QueryEvaluator

logger = structlog.get_logger()

# Global instances, rebuilt on every startup
datasets: dict[str, LoadedDataset] = {}
details_index: NodeDetailsIndex = NodeDetailsIndex()
evaluator: QueryEvaluator | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load datasets once per process lifetime."""
    global datasets, details_index, evaluator

    logger.info("starting_application", data_dir=str(DATA_DIR))

    loader = DatasetLoader(DATA_DIR)
    datasets = loader.load_available()
    details_index = loader.load_details()

    aliases = SponsorAliasTable.from_file(SPONSOR_ALIAS_FILE) if SPONSOR_ALIAS_FILE else SponsorAliasTable()
    evaluator = QueryEvaluator(aliases=aliases)

    logger.info("datasets_loaded", datasets=sorted(datasets), details=len(details_index))

    yield

    datasets = {}
    details_index = NodeDetailsIndex()
    evaluator = None
    logger.info("application_shutdown")


app = FastAPI(
    title="Threat Attribution Graph API",
    description="Normalized sponsor/actor/victim graphs and analytic queries",
    version="0.1.0",
    lifespan=lifespan,
)


# Request/Response models

class QueryRequest(BaseModel):
    """Query request model."""
    dataset: str = Field(default="geo", description="Dataset name: 'sector' or 'geo'")
    question: str = Field(..., description="Free-text analytic question")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    datasets: list[str]
    details_entries: int


def get_dataset(name: str) -> LoadedDataset:
    dataset = datasets.get(name)
    if dataset is None:
        raise HTTPException(status_code=404, detail=f"Dataset not loaded: {name}")
    return dataset


# Endpoints

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        datasets=sorted(datasets),
        details_entries=len(details_index),
    )


@app.get("/datasets/{name}")
async def get_graph(name: str):
    """Return a normalized graph with its normalization diagnostics."""
    dataset = get_dataset(name)
    return {
        "name": dataset.name,
        "loaded_at": dataset.loaded_at.isoformat(),
        "diagnostics": dataset.result.diagnostics(),
        **dataset.result.graph.to_dict(),
    }


@app.post("/query")
async def query(request: QueryRequest):
    """Answer an analytic question against one dataset.

    Unrecognized questions return the "unknown" result, never an error.
    """
    dataset = get_dataset(request.dataset)
    result = evaluator.evaluate(dataset.result.graph, request.question)
    return result.to_dict()


@app.get("/datasets/{name}/nodes/{node_id}/details")
async def node_details(name: str, node_id: str):
    """Return the ranked breakdowns for one node."""
    dataset = get_dataset(name)
    node = dataset.result.graph.get_node(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")

    details = details_index.describe(node)
    if details is None:
        raise HTTPException(status_code=404, detail=f"No details for node: {node_id}")

    return {
        **details.to_dict(),
        "type": node.type.value,
        "degree": node.degree,
        "neighbors": dataset.result.graph.neighbors(node.id),
    }
