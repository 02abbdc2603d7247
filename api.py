from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from codefacts.config import get_settings
from codefacts.dispatcher import analyze_tree, dispatch, supported_languages
from codefacts.model import AnalysisResult, TreeAnalysis
from codefacts.run import AnalysisRun


app = FastAPI(title="codefacts")


class AnalyzeRequest(BaseModel):
	path: str
	text: str
	language: Optional[str] = None


class AnalyzeTreeRequest(BaseModel):
	root_path: str


@app.get("/languages", response_model=List[str])
def languages() -> List[str]:
	return supported_languages()


@app.post("/analyze", response_model=AnalysisResult)
def analyze(req: AnalyzeRequest) -> AnalysisResult:
	with AnalysisRun(get_settings()) as run:
		return dispatch(req.path, req.text, req.language, run)


@app.post("/analyze/tree", response_model=TreeAnalysis)
def analyze_root(req: AnalyzeTreeRequest) -> TreeAnalysis:
	root = os.path.abspath(req.root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")
	with AnalysisRun(get_settings()) as run:
		return analyze_tree(root, run)
