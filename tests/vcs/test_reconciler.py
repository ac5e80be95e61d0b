"""Tests for the ignored/unversioned reconciliation."""

from __future__ import annotations

import asyncio

from assetaudit.vcs import IGNORED_QUERY, UNVERSIONED_QUERY, VCSReconciler
from tests._fixtures.fake_vcs import FakeRunner


def _expected() -> set[str]:
    return {
        "Assets/Foo/bar.png",
        "Assets/Foo/bar.png.meta",
        "Assets/Foo.meta",
        "Assets/Baz/qux.wav",
        "Assets/Baz/qux.wav.meta",
        "Assets/Baz.meta",
    }


def test_unversioned_asset_is_bucketed_and_removed() -> None:
    runner = FakeRunner(unversioned=["Assets/Foo/bar.png", "Library/ShaderCache.db"])
    expected = _expected()

    result = asyncio.run(VCSReconciler(runner).reconcile(expected))

    assert result.unversioned_in_build == {"Assets/Foo/bar.png"}
    assert result.ignored_in_build == frozenset()
    assert "Assets/Foo/bar.png" not in expected
    assert result.remaining == frozenset(expected)
    assert result.count == 1
    assert not result.is_clean


def test_empty_queries_give_clean_result() -> None:
    expected = _expected()

    result = asyncio.run(VCSReconciler(FakeRunner()).reconcile(expected))

    assert result.is_clean
    assert result.count == 0
    assert expected == _expected()


def test_path_in_both_listings_is_reported_once() -> None:
    # git lists ignored files in both queries when they are also untracked
    runner = FakeRunner(
        ignored=["Assets/Baz/qux.wav", "Assets/Baz/qux.wav.meta"],
        unversioned=["Assets/Baz/qux.wav", "Assets/Baz.meta"],
    )

    result = asyncio.run(VCSReconciler(runner).reconcile(_expected()))

    assert result.ignored_in_build == {"Assets/Baz/qux.wav", "Assets/Baz/qux.wav.meta"}
    assert result.unversioned_in_build == {"Assets/Baz.meta"}
    assert not (result.ignored_in_build & result.unversioned_in_build)


def test_queries_run_in_order_with_literal_paths() -> None:
    runner = FakeRunner()

    asyncio.run(VCSReconciler(runner).reconcile(set()))

    assert runner.calls == [
        ["-c", "core.quotepath=off", *IGNORED_QUERY],
        ["-c", "core.quotepath=off", *UNVERSIONED_QUERY],
    ]


def test_matching_is_case_sensitive() -> None:
    runner = FakeRunner(unversioned=["assets/foo/bar.png"])

    result = asyncio.run(VCSReconciler(runner).reconcile(_expected()))

    assert result.is_clean
