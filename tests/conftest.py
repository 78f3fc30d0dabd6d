from pathlib import Path

import pytest

from netrc_editor.helpers import init_logger
from netrc_editor.storage.file_utility import FileUtility
from netrc_editor.storage.platform import Platform

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_path() -> Path:
    return DATA_DIR / "sample.netrc"


@pytest.fixture
def sample_text(sample_path: Path) -> str:
    return sample_path.read_text(encoding="utf-8")


@pytest.fixture
def logger():
    return init_logger("test", "DEBUG")


@pytest.fixture
def file_utility(logger) -> FileUtility:
    return FileUtility(platform=Platform.detect(), logger=logger)
