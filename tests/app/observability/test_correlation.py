"""Testes do escopo de correlation_id."""

from __future__ import annotations

import asyncio

import pytest

from app.observability import correlation_scope, get_correlation_id, normalize_correlation_id


class TestNormalize:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("abc-123", "abc-123"),
            ("  req.42_x  ", "req.42_x"),
            (None, None),
            ("", None),
            ("   ", None),
            ("tem espaço", None),
            ("x" * 129, None),
        ],
    )
    def test_normalize(self, raw: str | None, expected: str | None) -> None:
        assert normalize_correlation_id(raw) == expected


class TestCorrelationScope:
    def test_uses_header_value_and_restores(self) -> None:
        assert get_correlation_id() == ""

        with correlation_scope("corr-1") as correlation_id:
            assert correlation_id == "corr-1"
            assert get_correlation_id() == "corr-1"

        assert get_correlation_id() == ""

    def test_generates_id_for_invalid_header(self) -> None:
        with correlation_scope("inválido!") as correlation_id:
            assert correlation_id
            assert correlation_id != "inválido!"
            assert get_correlation_id() == correlation_id

    def test_nested_scopes_restore_outer(self) -> None:
        with correlation_scope("outer"):
            with correlation_scope("inner"):
                assert get_correlation_id() == "inner"
            assert get_correlation_id() == "outer"

    @pytest.mark.asyncio
    async def test_tasks_created_in_scope_inherit_id(self) -> None:
        async def read() -> str:
            await asyncio.sleep(0)
            return get_correlation_id()

        with correlation_scope("task-ctx"):
            task = asyncio.create_task(read())

        assert await task == "task-ctx"
