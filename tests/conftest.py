import pytest


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def fixed_rng() -> FixedRandom:
    # 0.5 makes the micro-variation term exactly zero
    return FixedRandom(0.5)
