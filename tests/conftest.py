import pytest

from attrsys.config.analysis_config import analysis_config


@pytest.fixture(autouse=True)
def reset_analysis_config():
    analysis_config.reset()
    yield
    analysis_config.reset()
