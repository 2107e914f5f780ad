from __future__ import annotations

import os
from typing import List, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ideation.config import load_config
from ideation.engine import IdeationEngine
from ideation.errors import ConfigError, DiscoveryError
from ideation.model import IdeationResult, Summary


app = FastAPI(title="Ideation Engine")


class AnalyzeRequest(BaseModel):
	root_path: str
	focus: Optional[str] = None
	max_files: Optional[int] = None
	ignore_patterns: Optional[List[str]] = None


class ReportRequest(AnalyzeRequest):
	format: Literal["markdown", "json"] = "markdown"


class ReportResponse(BaseModel):
	format: str
	content: str


def _run(req: AnalyzeRequest) -> Tuple[IdeationEngine, IdeationResult]:
	root = os.path.abspath(req.root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")
	try:
		config = load_config(focus=req.focus, max_files=req.max_files, ignore_patterns=req.ignore_patterns)
	except ConfigError as e:
		raise HTTPException(status_code=400, detail=str(e))
	engine = IdeationEngine(root, config=config)
	try:
		result = engine.analyze_codebase()
	except DiscoveryError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return engine, result


@app.post("/analyze", response_model=IdeationResult)
def analyze(req: AnalyzeRequest) -> IdeationResult:
	_, result = _run(req)
	return result


@app.post("/summary", response_model=Summary)
def summary(req: AnalyzeRequest) -> Summary:
	engine, _ = _run(req)
	return engine.get_summary()


@app.post("/report", response_model=ReportResponse)
def report(req: ReportRequest) -> ReportResponse:
	engine, _ = _run(req)
	return ReportResponse(format=req.format, content=engine.generate_report(fmt=req.format))


def create_app() -> FastAPI:
	return app
