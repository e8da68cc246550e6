# api/api.py
import io
import logging
from typing import List
from datetime import datetime, timezone

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from PIL import Image
import numpy as np

import os, sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from expression.catalog import Expression
from expression.config import (
    MIN_DETECTION_CONFIDENCE, THRESHOLDS_PATH, load_thresholds, setup_logging,
)
from expression.core import ExpressionAnalyzer
from expression.landmarks import LandmarkDetector
from expression.models import (
    AnalyzeResponse, Detection, DetectionResponse, ExpressionInfo, FaceLandmarks,
    LandmarksRequest,
)

setup_logging()
logger = logging.getLogger(__name__)

# ------------ App ------------
app = FastAPI(title="Facial Expression Rater API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

analyzer = ExpressionAnalyzer(
    thresholds=load_thresholds(),
    detector=LandmarkDetector(min_detection_confidence=MIN_DETECTION_CONFIDENCE),
)

# ------------ Helpers ------------
def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

def _response(detections: List[Detection], face_detected: bool, source: str) -> AnalyzeResponse:
    return AnalyzeResponse(
        timestamp_utc=_now_iso(),
        source=source,
        face_detected=face_detected,
        detections=[DetectionResponse(**d.__dict__) for d in detections],
    )

# ------------ Endpoints ------------
@app.get("/health")
async def health():
    return {"status": "ok", "time": _now_iso(), "thresholds": THRESHOLDS_PATH}

@app.get("/expressions", response_model=List[ExpressionInfo])
async def list_expressions():
    return [ExpressionInfo(name=e.value, emoji=e.emoji, computable=e.computable) for e in Expression]

# plain def: FastAPI runs the blocking FaceMesh call in its threadpool
@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(file: UploadFile = File(...), source: str = "api"):
    try:
        raw = file.file.read()
        pil = Image.open(io.BytesIO(raw)).convert("RGB")
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid image file")

    try:
        landmarks = analyzer.detector.detect(np.array(pil))
    except Exception as e:
        # a detector failure is reported like a frame without a face
        logger.warning(f"Landmark detection failed for {file.filename}: {e}")
        landmarks = None

    try:
        detections = analyzer.classify(landmarks)
    except Exception as e:
        logger.exception("Classification failed")
        raise HTTPException(status_code=500, detail=f"Analysis error: {e}")
    return _response(detections, landmarks is not None, source)

@app.post("/analyze/landmarks", response_model=AnalyzeResponse)
async def analyze_landmarks(req: LandmarksRequest):
    try:
        landmarks = FaceLandmarks.from_regions(req.regions)
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response(analyzer.classify(landmarks), True, req.source or "api")
