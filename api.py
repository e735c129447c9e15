from __future__ import annotations

import argparse
import os

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from tsvast.errors import ConfigError
from tsvast.model import SummarizerSettings, VastDocument
from tsvast.output import summarize


app = FastAPI(title="TypeScript Summary Service")


class SummarizeRequest(BaseModel):
	project_path: str
	expand_functions: bool = False
	add_unnamed_leafs: bool = False
	flat_paths: bool = False
	drop_external_deps: bool = False


@app.post("/summarize", response_model=VastDocument, response_model_exclude_none=True)
def summarize_request(req: SummarizeRequest) -> VastDocument:
	root = os.path.abspath(req.project_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid project_path: {root}")

	settings = SummarizerSettings(
		expand_functions=req.expand_functions,
		add_unnamed_leafs=req.add_unnamed_leafs,
		flat_paths=req.flat_paths,
		drop_external_deps=req.drop_external_deps,
	)
	try:
		return summarize(req.project_path, settings)
	except ConfigError as exc:
		raise HTTPException(status_code=422, detail=str(exc)) from exc


def create_app() -> FastAPI:
	return app


def main() -> None:
	parser = argparse.ArgumentParser(prog="tsvast-serve")
	parser.add_argument("--host", default="127.0.0.1")
	parser.add_argument("--port", type=int, default=8000)
	parser.add_argument("--reload", action="store_true")
	args = parser.parse_args()
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
	main()
