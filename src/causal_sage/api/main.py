"""
FastAPI application for the Causal Sage service.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException

from ..config import Config, configure_logging
from ..errors import ExtractionError
from ..graph import CausalGraph
from ..ingest import ExtractionPipeline
from ..llm import Embedder, OpenAIEmbedder, OpenAIReasoner, Reasoner
from ..render import render_dot, render_xmile
from ..schema import ExtractRequest, ExtractResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="Causal Sage", version="0.1.0")

# Global state
config: Optional[Config] = None
reasoner: Optional[Reasoner] = None
embedder: Optional[Embedder] = None


@app.on_event("startup")
async def startup_event():
    """Initialize global state on startup."""
    global config, reasoner, embedder

    config = Config.default()
    configure_logging(config)
    reasoner = OpenAIReasoner(config)
    embedder = OpenAIEmbedder(config)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "causal-sage"}


@app.post("/extract", response_model=ExtractResponse)
def extract_relationships(request: ExtractRequest):
    """
    Extract causal relationships from text.

    Args:
        request: Source text and rendering flags

    Returns:
        ExtractResponse with numbered lines, relationships and feedback loops
    """
    if config is None or reasoner is None or embedder is None:
        raise HTTPException(status_code=500, detail="Service not initialized")

    pipeline = ExtractionPipeline(config, reasoner, embedder)
    try:
        result = pipeline.run(request.text, threshold=request.threshold)
    except ExtractionError as e:
        logger.error("Extraction failed at %s: %s", e.stage, e)
        raise HTTPException(status_code=422, detail={"stage": e.stage, "message": str(e)})

    lines = result.lines()
    graph = CausalGraph.from_relationships(result.relationships)

    return ExtractResponse(
        lines=lines,
        relationships=result.relationships,
        feedback_loops=graph.feedback_loops(),
        dot=render_dot(lines) if request.diagram else None,
        xmile=render_xmile(lines) if request.xmile else None,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
