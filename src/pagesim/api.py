from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .compare import compare
from .errors import ErrorCodes, InsufficientDocuments
from .pipeline import fingerprint_document, run_documents
from .simhash import format_fingerprint, parse_fingerprint
from .sources import Document


class FingerprintReq(BaseModel):
    text: str
    hash: str = "fnv1a"


class DocIn(BaseModel):
    label: str
    text: str


class CompareReq(BaseModel):
    documents: List[DocIn] = Field(..., description="Two or more documents; compared pairwise")
    hash: str = "fnv1a"


class DistanceReq(BaseModel):
    a: str = Field(..., description="Hex fingerprint")
    b: str = Field(..., description="Hex fingerprint")


def build_app() -> FastAPI:
    app = FastAPI(title="pagesim API", version=__version__, default_response_class=ORJSONResponse)

    @app.get("/health")
    def health():
        return {"ok": True, "version": __version__}

    @app.post("/fingerprint")
    def fingerprint(req: FingerprintReq):
        try:
            fd = fingerprint_document(Document("request", req.text.encode("utf-8")), req.hash)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return {"fingerprint": fd.hex, "features": fd.feature_count}

    @app.post("/compare")
    def compare_docs(req: CompareReq):
        docs = [Document(d.label, d.text.encode("utf-8")) for d in req.documents]
        try:
            report = run_documents(docs, hash_name=req.hash)
        except InsufficientDocuments as e:
            raise HTTPException(status_code=422, detail={"code": e.code, "message": str(e)})
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return report.to_dict()

    @app.post("/distance")
    def distance(req: DistanceReq):
        try:
            a, b = parse_fingerprint(req.a), parse_fingerprint(req.b)
        except ValueError as e:
            raise HTTPException(status_code=422, detail={"code": ErrorCodes.ERR_BAD_FINGERPRINT, "message": str(e)})
        return {"a": format_fingerprint(a), "b": format_fingerprint(b), **compare(a, b).to_dict()}

    return app


# Export module-level app for Uvicorn discovery (uvicorn pagesim.api:app)
app = build_app()
