import pytest

from rhythmflow.utils.config import Settings


class FakeClock:
    """Settable epoch-seconds clock"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        token_secret="test-secret",
        data_dir=tmp_path,
        bcrypt_rounds=4,
    )
