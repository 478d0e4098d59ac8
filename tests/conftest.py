"""Pytest configuration and fixtures for taskgraph-mcp tests."""

import json

import pytest

from taskgraph_mcp.config import ServerConfig, set_config
from taskgraph_mcp.utils.store import InMemoryTaskStore, JsonTaskStore, set_store


@pytest.fixture(autouse=True)
def default_config():
    """Pin the global config to defaults so env vars and local TOML files don't leak in."""
    config = ServerConfig()
    set_config(config)
    yield config
    set_config(None)
    set_store(None)


@pytest.fixture
def chain_tasks():
    """Tasks 1..3 where 3 depends on 2 and 2 depends on 1."""
    return [
        {"id": 1, "title": "Set up repository", "status": "pending", "priority": "medium", "dependencies": []},
        {"id": 2, "title": "Write schema", "status": "pending", "priority": "medium", "dependencies": [1]},
        {"id": 3, "title": "Build API", "status": "pending", "priority": "medium", "dependencies": [2]},
    ]


@pytest.fixture
def corrupted_tasks():
    """A 3-node cycle (1 -> 2 -> 3 -> 1) plus a dangling reference from task 4."""
    return [
        {"id": 1, "title": "Alpha", "status": "pending", "dependencies": [2]},
        {"id": 2, "title": "Beta", "status": "pending", "dependencies": [3]},
        {"id": 3, "title": "Gamma", "status": "pending", "dependencies": [1]},
        {"id": 4, "title": "Delta", "status": "pending", "dependencies": [99]},
    ]


@pytest.fixture
def selection_tasks():
    """Two high-priority eligible tasks, one medium, and the done task one of them waits on."""
    return [
        {"id": 1, "title": "Task A", "status": "pending", "priority": "high", "dependencies": []},
        {"id": 2, "title": "Task B", "status": "pending", "priority": "high", "dependencies": [4]},
        {"id": 3, "title": "Task C", "status": "pending", "priority": "medium", "dependencies": []},
        {"id": 4, "title": "Done work", "status": "done", "priority": "low", "dependencies": []},
    ]


@pytest.fixture
def memory_store(chain_tasks):
    """In-memory store installed as the global store."""
    store = InMemoryTaskStore(chain_tasks)
    set_store(store)
    return store


@pytest.fixture
def tasks_file(tmp_path, chain_tasks):
    """A tasks.json file in the {"tasks": [...]} layout."""
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"tasks": chain_tasks, "metadata": {"version": 1}}), encoding="utf-8")
    return path


@pytest.fixture
def json_store(tasks_file):
    """JSON file store installed as the global store."""
    store = JsonTaskStore(tasks_file)
    set_store(store)
    return store
