# db.py
import os
from contextlib import contextmanager
from typing import Iterator

from dotenv import load_dotenv
from fastapi import Request
from sqlmodel import SQLModel, create_engine, Session

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./dashboard.db"


class DataFetchError(RuntimeError):
  """A read against the database failed; message is safe to show callers."""


class Database:
  """Owns the engine (and its connection pool) for the life of the process."""

  def __init__(self, url: str, echo: bool = False):
    connect_args = {}
    if url.startswith("sqlite"):
      connect_args["check_same_thread"] = False
    self.url = url
    self.engine = create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)

  @classmethod
  def from_env(cls) -> "Database":
    url = os.getenv("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL
    echo = os.getenv("DB_ECHO", "false").strip().lower() in ("1", "true", "yes")
    return cls(url, echo=echo)

  def create_all(self) -> None:
    SQLModel.metadata.create_all(self.engine)

  @contextmanager
  def session(self) -> Iterator[Session]:
    with Session(self.engine) as session:
      yield session

  def dispose(self) -> None:
    self.engine.dispose()


def get_database(request: Request) -> Database:
  return request.app.state.database


def get_session(request: Request):
  with get_database(request).session() as session:
    yield session
