# main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from db import DataFetchError, Database
from dashboard_route import router as dashboard_router

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
CORS_ORIGINS = [
  x.strip()
  for x in os.getenv("CORS_ORIGINS", "http://127.0.0.1:3000,http://localhost:3000").split(",")
  if x.strip()
]

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
  database = database or Database.from_env()

  @asynccontextmanager
  async def lifespan(app: FastAPI):
    database.create_all()
    logger.info("Database ready at %s", database.engine.url.render_as_string(hide_password=True))
    yield
    database.dispose()

  app = FastAPI(title="Acme Dashboard Backend", version="1.0.0", lifespan=lifespan)
  app.state.database = database
  app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )

  @app.exception_handler(DataFetchError)
  async def data_fetch_error(request: Request, exc: DataFetchError):
    return JSONResponse(status_code=500, content={"error": str(exc)})

  @app.get("/health")
  def health():
    return {"ok": True}

  app.include_router(dashboard_router)
  return app


app = create_app()
