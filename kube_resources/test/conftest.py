import pytest

from kube_resources.test.fixtures import Fixtures
from kube_resources.utils import config
from kube_resources.utils.environment import (
    KUBE_RESOURCES_CONFIG,
    KUBE_RESOURCES_LOG_LEVEL,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # init_env writes to os.environ, setenv makes sure it is restored
    monkeypatch.setenv(KUBE_RESOURCES_CONFIG, "")
    monkeypatch.setenv(KUBE_RESOURCES_LOG_LEVEL, "")
    monkeypatch.setattr(config, "_config", None)


@pytest.fixture
def grafana_fxt() -> Fixtures:
    return Fixtures("grafana")
