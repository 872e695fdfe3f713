# kvcache/routers/commands.py

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from jsonschema import Draft7Validator
from pydantic import BaseModel

from kvcache.schemas.commands import HsetCommand, PushCommand, SetCommand, TTLCommand, ValueResponse
from kvcache.services.store import Store

logger = logging.getLogger(__name__)

# One route per store operation; errors raised by the store are mapped to 500 in kvcache.main.
router = APIRouter(tags=["commands"])

# Load and prepare request body schemas once at import time
schema_path = Path(__file__).resolve().parents[1] / "schemas" / "command_schemas.json"
with schema_path.open("r", encoding="utf-8") as f:
    command_schemas = json.load(f)

validators: Dict[str, Draft7Validator] = {
    name: Draft7Validator(schema) for name, schema in command_schemas.items()
}

OK = ValueResponse(value="ok")

M = TypeVar("M", bound=BaseModel)


class MalformedBody(Exception):
    """Request body is not JSON or does not match the command schema (answered with 400)."""

    def __init__(self, message: str, validation_errors: Optional[List[str]] = None):
        super().__init__(message)
        self.validation_errors = validation_errors


def get_store(request: Request) -> Store:
    """The store owned by the running application."""
    return request.app.state.store


async def read_command(request: Request, schema_name: str, model: Type[M]) -> M:
    """
    Parse and validate a JSON body before the store is touched.
    Raises MalformedBody for non-JSON payloads and schema violations.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise MalformedBody("Invalid JSON format")

    errors = sorted(validators[schema_name].iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        raise MalformedBody("invalid request body", [e.message for e in errors])

    return model(**payload)


@router.get("/", response_class=PlainTextResponse)
def hello():
    return "Hello, World!"


@router.get("/keys", response_model=ValueResponse, response_model_exclude_none=True)
def keys(store: Store = Depends(get_store)):
    return ValueResponse(value=store.keys())


@router.delete("/remove/{key}", response_model=ValueResponse, response_model_exclude_none=True)
def remove(key: str, store: Store = Depends(get_store)):
    store.remove(key)
    return OK


@router.post("/ttl/{key}", response_model=ValueResponse, response_model_exclude_none=True)
async def set_ttl(key: str, request: Request, store: Store = Depends(get_store)):
    """
    POST /ttl/{key} with {"value": seconds}
    The key is removed once the TTL elapses. A later, longer TTL does not
    cancel an earlier, shorter one.
    """
    command = await read_command(request, "ttl", TTLCommand)
    store.set_ttl(key, command.value)
    logger.debug("ttl: key=%r seconds=%s", key, command.value)
    return OK


@router.post("/set", response_model=ValueResponse, response_model_exclude_none=True)
async def set_value(request: Request, store: Store = Depends(get_store)):
    command = await read_command(request, "set", SetCommand)
    store.set(command.key, command.value)
    return OK


@router.get("/get/{key}", response_model=ValueResponse, response_model_exclude_none=True)
def get_value(key: str, store: Store = Depends(get_store)):
    return ValueResponse(value=store.get(key))


@router.post("/push", response_model=ValueResponse, response_model_exclude_none=True)
async def push(request: Request, store: Store = Depends(get_store)):
    command = await read_command(request, "push", PushCommand)
    store.push(command.key, *command.value)
    return OK


@router.get("/pop/{key}", response_model=ValueResponse, response_model_exclude_none=True)
def pop(key: str, store: Store = Depends(get_store)):
    # Pop consumes an element: clients must not blindly retry it.
    return ValueResponse(value=store.pop(key))


@router.post("/hset", response_model=ValueResponse, response_model_exclude_none=True)
async def hset(request: Request, store: Store = Depends(get_store)):
    command = await read_command(request, "hset", HsetCommand)
    store.hset(command.key, command.field, command.value)
    return OK


@router.get("/hget/{key}/{field}", response_model=ValueResponse, response_model_exclude_none=True)
def hget(key: str, field: str, store: Store = Depends(get_store)):
    return ValueResponse(value=store.hget(key, field))
