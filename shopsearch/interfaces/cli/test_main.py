"""Tests for the CLI."""

from __future__ import annotations

import importlib
import json
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from shopsearch import __version__
from shopsearch.adapters.storage import MemoryStorage
from shopsearch.config import Settings, get_settings
from shopsearch.domains.history import RecentSearchStore
from shopsearch.domains.search import Category, Product, SearchSession
from shopsearch.interfaces.wiring import create_recent_store, create_session

from .main import app

runner = CliRunner()


@pytest.fixture
def storage_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    path = tmp_path / "storage.json"
    monkeypatch.setenv("SHOPSEARCH_STORAGE_PATH", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_recent_lists_persisted_searches(storage_file: Path) -> None:
    storage_file.write_text(json.dumps({"recentSearches": json.dumps(["shoes", "bags"])}))

    result = runner.invoke(app, ["recent"])

    assert result.exit_code == 0
    assert "1. shoes" in result.stdout
    assert "2. bags" in result.stdout


def test_recent_clear(storage_file: Path) -> None:
    storage_file.write_text(json.dumps({"recentSearches": json.dumps(["shoes"])}))

    result = runner.invoke(app, ["recent", "--clear"])

    assert result.exit_code == 0
    assert json.loads(storage_file.read_text()) == {}


def test_recent_empty(storage_file: Path) -> None:
    result = runner.invoke(app, ["recent"])
    assert "No recent searches" in result.stdout


def test_settings_drive_wiring(tmp_path: Path) -> None:
    settings = Settings(
        storage_path=tmp_path / "s.json",
        recent_searches_key="history",
        recent_searches_max=3,
        debounce_ms=0,
    )

    store = create_recent_store(settings)
    store.record("caps")
    session = create_session(settings, recent=store)

    assert store.max_size == 3
    assert json.loads(settings.storage_path.read_text()) == {"history": '["caps"]'}
    assert session.recent_searches == ["caps"]


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace the storefront-backed session with one over an in-memory catalog."""
    catalog = AsyncMock()
    catalog.fetch_all_products.return_value = [
        Product(id="1", name="Red Sneakers", category="Shoes", price=60, rating=4.5),
        Product(id="2", name="Blue Sneaker", price=40),
    ]
    catalog.fetch_featured_products.return_value = [Product(id="2", name="Blue Sneaker", price=40)]
    catalog.fetch_bestseller_products.return_value = []
    catalog.fetch_categories.return_value = [Category(id="c1", name="Sneakers")]

    remote = AsyncMock()
    remote.search.return_value = []
    client = AsyncMock()

    def create() -> tuple[SearchSession, AsyncMock]:
        session = SearchSession(
            catalog,
            remote,
            RecentSearchStore(MemoryStorage()),
            debounce_ms=0,
            persist_delay_ms=0,
        )
        return session, client

    monkeypatch.setattr(importlib.import_module("shopsearch.interfaces.cli.main"), "_create_session", create)
    return client


def test_search_prints_results_table(fake_session: AsyncMock) -> None:
    result = runner.invoke(app, ["search", "sneaker", "--sort", "price"])

    assert result.exit_code == 0, result.stdout
    assert "Blue Sneaker" in result.stdout
    assert "Red Sneakers" in result.stdout
    assert result.stdout.index("Blue Sneaker") < result.stdout.index("Red Sneakers")
    assert "60.00" in result.stdout
    fake_session.close.assert_awaited()


def test_search_empty_state_offers_alternatives(fake_session: AsyncMock) -> None:
    result = runner.invoke(app, ["search", "zzzz"])

    assert result.exit_code == 0
    assert "No products found" in result.stdout
    assert "Blue Sneaker" in result.stdout


def test_search_rejects_unknown_sort(fake_session: AsyncMock) -> None:
    result = runner.invoke(app, ["search", "sneaker", "--sort", "cheapest"])
    assert result.exit_code != 0


def test_suggest_lists_products_and_categories(fake_session: AsyncMock) -> None:
    result = runner.invoke(app, ["suggest", "sneak"])

    assert result.exit_code == 0
    assert "Blue Sneaker" in result.stdout
    assert "Sneakers" in result.stdout
    assert "(category)" in result.stdout


def test_suggest_without_matches(fake_session: AsyncMock) -> None:
    result = runner.invoke(app, ["suggest", "xyz"])
    assert "No suggestions" in result.stdout
