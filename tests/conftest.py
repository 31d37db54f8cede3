from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

ROOT = TESTS_DIR.parent
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from fixtures import FakeOpenAI, FakeOpenAIFactory  # noqa: E402


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    """Offline stand-in for an OpenAI client; queue replies before use."""

    return FakeOpenAI()


@pytest.fixture
def openai_factory() -> FakeOpenAIFactory:
    return FakeOpenAIFactory()


@pytest.fixture(autouse=True)
def isolated_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point the workspace at a per-test directory."""

    home = tmp_path / "quizcraft-home"
    monkeypatch.setenv("QUIZCRAFT_HOME", str(home))
    monkeypatch.delenv("QUIZCRAFT_CONFIG", raising=False)
    yield home
