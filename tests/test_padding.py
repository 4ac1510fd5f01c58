"""Tests for the padding plan."""

import pytest

from fastcwt.core.padding import PaddingPlan, next_power_of_two, plan
from fastcwt.errors import InvalidParameter


class TestNextPowerOfTwo:
    """Test next_power_of_two."""

    @pytest.mark.parametrize(
        "n, expected", [(1, 1), (2, 2), (3, 4), (1000, 1024), (1024, 1024), (1025, 2048)]
    )
    def test_values(self, n: int, expected: int) -> None:
        """Test smallest power of two not below n."""
        assert next_power_of_two(n) == expected


class TestPlan:
    """Test plan()."""

    def test_pow2(self) -> None:
        """Test default policy doubles then rounds up to a power of two."""
        assert plan(1000) == PaddingPlan(padded_length=2048, valid_offset=0, valid_length=1000)
        assert plan(1024).padded_length == 2048
        assert plan(1).padded_length == 2

    def test_fast(self) -> None:
        """Test fast policy picks a smooth length."""
        assert plan(1000, policy="fast").padded_length == 2000
        assert plan(48000, policy="fast").padded_length == 96000

    @pytest.mark.parametrize("n", [1, 7, 333, 1000, 4097, 48000])
    @pytest.mark.parametrize("policy", ["pow2", "fast"])
    def test_at_least_double(self, n: int, policy: str) -> None:
        """Test the padded length avoids circular wrap-around."""
        padding_plan = plan(n, policy=policy)  # type: ignore[arg-type]
        assert padding_plan.padded_length >= 2 * n
        assert padding_plan.valid_length == n

    def test_window(self) -> None:
        """Test the valid window covers the original samples."""
        assert plan(10).window == slice(0, 10)

    def test_unknown_policy(self) -> None:
        """Test unknown policies raise InvalidParameter."""
        with pytest.raises(InvalidParameter, match="padding policy"):
            plan(100, policy="pow3")  # type: ignore[arg-type]

    @pytest.mark.parametrize("n", [0, -4, 2.0])
    def test_invalid_length(self, n: object) -> None:
        """Test signal_length must be a positive integer."""
        with pytest.raises(InvalidParameter, match="signal_length"):
            plan(n)  # type: ignore[arg-type]
