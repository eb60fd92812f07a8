"""Tests for cooperative cancellation tokens."""

from __future__ import annotations

import pytest

from declutter.features.suggestions.usecases.cancellation import CancellationToken, SuggestionCancelled


def test_token_lifecycle() -> None:
    token = CancellationToken()

    assert not token.cancelled
    assert not token.wait(0)
    token.raise_if_cancelled()

    token.cancel()

    assert token.cancelled
    assert token.wait(10)
    with pytest.raises(SuggestionCancelled):
        token.raise_if_cancelled()
