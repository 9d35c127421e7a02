"""Unit tests for domain/shared/types.py: Pydantic Annotated type constraints."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from music_relay.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
    TrackTitleStr,
)


def _model_for(annotation, field_name: str = "v"):
    """Dynamically create a Pydantic model with a single field of the given type."""
    return type("M", (BaseModel,), {"__annotations__": {field_name: annotation}})


# ── Numeric ─────────────────────────────────────────────────────────


class TestNumericTypes:
    @pytest.mark.parametrize(
        ("annotation", "accepted", "rejected"),
        [
            (NonNegativeInt, [0, 7], [-1]),
            (PositiveInt, [1, 10**6], [0, -5]),
            (NonNegativeFloat, [0.0, 2.5], [-0.1]),
            (DurationSeconds, [0, 86_400], [-1, 86_401]),
        ],
    )
    def test_bounds(self, annotation, accepted, rejected):
        M = _model_for(annotation)

        for value in accepted:
            assert M(v=value).v == value
        for value in rejected:
            with pytest.raises(ValidationError):
                M(v=value)


# ── Strings ─────────────────────────────────────────────────────────


class TestNonEmptyStr:
    M = _model_for(NonEmptyStr)

    def test_valid(self):
        assert self.M(v="a").v == "a"

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            self.M(v="")


class TestTrackTitleStr:
    M = _model_for(TrackTitleStr)

    def test_max_length(self):
        assert len(self.M(v="x" * 500).v) == 500

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError):
            self.M(v="x" * 501)


class TestHttpUrlStr:
    M = _model_for(HttpUrlStr)

    @pytest.mark.parametrize("url", ["http://example.com", "https://youtu.be/abc"])
    def test_http_schemes(self, url):
        assert self.M(v=url).v == url

    @pytest.mark.parametrize("url", ["ftp://example.com", "youtube.com/watch", ""])
    def test_other_schemes_rejected(self, url):
        with pytest.raises(ValidationError):
            self.M(v=url)
