from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from socle.artifacts import PlatformVariant  # noqa: E402
from socle.config import PipelineSettings  # noqa: E402
from socle.pipeline import MaterializationPipeline  # noqa: E402
from tests.fixtures.toolchain_fake import FakeToolchain  # noqa: E402


@pytest.fixture(autouse=True)
def clear_socle_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``SOCLE_*`` variables of the developer's shell out of the tests."""

    for key in list(os.environ):
        if key.startswith("SOCLE_"):
            monkeypatch.delenv(key)


@pytest.fixture()
def toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture()
def pipeline(toolchain: FakeToolchain) -> MaterializationPipeline:
    return MaterializationPipeline(
        settings=PipelineSettings(),
        runner=toolchain,
        host=PlatformVariant.UNIX,
    )
