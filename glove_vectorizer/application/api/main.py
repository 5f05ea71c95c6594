from contextlib import asynccontextmanager
from typing import List
import traceback

from fastapi import Depends, FastAPI, HTTPException, Request
from loguru import logger
from pydantic import BaseModel

from glove_vectorizer.application.errors import NoVectorsError, VectorizerError
from glove_vectorizer.application.log_setup import setup_logging
from glove_vectorizer.application.services.vectorizer_service import VectorizerService
from glove_vectorizer.application.settings import get_settings

# Configure logging once
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # one service (and one read-only store handle) for the process lifetime
    settings = get_settings()
    service = VectorizerService.build(settings)
    app.state.vectorizer = service
    try:
        yield
    finally:
        service.close()


app = FastAPI(title="GloVe Vectorizer", lifespan=lifespan)


# --- Dependencies ---
def vectorizer_dep(request: Request) -> VectorizerService:
    service = getattr(request.app.state, "vectorizer", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Vectorizer is not initialized")
    return service


# --- Schemas ---
class VectorizeRequest(BaseModel):
    query: List[str]

class VectorizeResponse(BaseModel):
    vector: List[float]


# --- Endpoints ---
@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok"}

@app.post("/vectorize", tags=["vectors"], response_model=VectorizeResponse)
def vectorize(body: VectorizeRequest, svc: VectorizerService = Depends(vectorizer_dep)):
    """body.query = list of texts; returns the weighted centroid of all their word vectors"""
    try:
        vector = svc.aggregate_queries(body.query)
    except NoVectorsError as e:
        # nonsense / all-stopword input: the client's problem, not ours
        logger.info("Nothing to vectorize for {} query string(s)", len(body.query))
        raise HTTPException(status_code=400, detail=f"Failed to vectorize: {e}")
    except VectorizerError as e:
        logger.error("Vectorize failed: {}\n{}", e, traceback.format_exc())
        raise HTTPException(status_code=500, detail=f"Failed to vectorize: {type(e).__name__}: {e}")

    return {"vector": vector.tolist()}
