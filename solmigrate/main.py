"""
Migration Copilot FastAPI Application.

Solidity → Solana/Anchor migration assistant:
  POST /analyze  → structural analysis of a .sol file
  POST /migrate  → analysis + mapping rules + Anchor skeleton + costs + checklist
  GET  /rules    → static EVM → Solana mapping catalogue
  GET  /audit    → recent audit entries
  GET  /health   → {"status": "ok"}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from solmigrate.api.routes.analyze import router as analyze_router
from solmigrate.api.routes.health import VERSION, router as health_router
from solmigrate.api.routes.rules import router as rules_router
from solmigrate.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("solmigrate")

app = FastAPI(
    title="Migration Copilot",
    description="Solidity source analysis and Solana/Anchor migration planning",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(analyze_router)
app.include_router(rules_router)


def _error_details(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = (await request.body()).decode("utf-8", errors="replace")
    logger.error(f"Validation Error. Raw body: {body[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": _error_details(exc), "body": body[:100]},
    )
