import pytest
from cliptree import config as clip_config


@pytest.fixture(autouse=True)
def reset_clip_config():
    """
    Every test starts from the default configuration, whatever an earlier
    test loaded or changed.
    """
    clip_config.reset_config()
    yield
    clip_config.reset_config()
