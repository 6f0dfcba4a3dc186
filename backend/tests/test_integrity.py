#!/usr/bin/env python3
# backend/tests/test_integrity.py
"""
Integrity evaluation of single records against the blob store.
"""

import pytest

from fakes import FakeBlobStore
from photo_catalog.exceptions import DeadlineExceeded
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.integrity import evaluate
from photo_catalog.services.verification.models import AssetRole, IssueCode


def _store_for(record, original_size=20_000, skip=()):
    blobs = FakeBlobStore()
    sizes = {"path": original_size, "thumbnail_path_100": 900, "thumbnail_path_350": 5000}
    for column, size in sizes.items():
        if column not in skip:
            blobs.add(getattr(record, column), size)
    return blobs


def test_all_assets_present_is_intact(make_record):
    record = make_record()
    verdict = evaluate(record, _store_for(record))

    assert verdict.is_intact is True
    assert verdict.issues == ()
    assert verdict.per_asset[AssetRole.ORIGINAL].exists
    assert verdict.per_asset[AssetRole.ORIGINAL].size == 20_000
    assert verdict.per_asset[AssetRole.THUMBNAIL_100].size == 900


@pytest.mark.parametrize(
    "column, issue",
    [
        ("path", IssueCode.ORIGINAL_MISSING),
        ("thumbnail_path_100", IssueCode.THUMBNAIL100_MISSING),
        ("thumbnail_path_350", IssueCode.THUMBNAIL350_MISSING),
    ],
)
def test_missing_blob_reports_issue(make_record, column, issue):
    record = make_record()
    verdict = evaluate(record, _store_for(record, skip=(column,)))

    assert verdict.is_intact is False
    assert verdict.issues == (issue,)


def test_original_size_floor_boundary(make_record):
    record = make_record()

    small = evaluate(record, _store_for(record, original_size=9_999))
    assert small.is_intact is False
    assert small.issues == (IssueCode.ORIGINAL_TOO_SMALL,)
    assert small.per_asset[AssetRole.ORIGINAL].exists is True

    exact = evaluate(record, _store_for(record, original_size=10_000))
    assert exact.is_intact is True
    assert IssueCode.ORIGINAL_TOO_SMALL not in exact.issues


def test_size_floor_is_configurable(make_record):
    record = make_record()
    verdict = evaluate(record, _store_for(record, original_size=500), min_original_size=100)
    assert verdict.is_intact is True


def test_issues_are_ordered(make_record):
    record = make_record()
    verdict = evaluate(record, FakeBlobStore())
    assert verdict.issues == (
        IssueCode.ORIGINAL_MISSING,
        IssueCode.THUMBNAIL100_MISSING,
        IssueCode.THUMBNAIL350_MISSING,
    )


def test_probe_failure_is_treated_as_missing(make_record):
    record = make_record()
    blobs = _store_for(record)
    blobs.failing.add(record.thumbnail_path_350)

    verdict = evaluate(record, blobs)

    probe = verdict.per_asset[AssetRole.THUMBNAIL_350]
    assert probe.exists is False
    assert "connection reset" in probe.error
    assert verdict.issues == (IssueCode.THUMBNAIL350_MISSING,)
    assert verdict.is_intact is False


def test_empty_path_is_not_probed_and_not_an_issue(make_record):
    record = make_record(thumbnail_path_100="")
    blobs = _store_for(record, skip=("thumbnail_path_100",))

    verdict = evaluate(record, blobs)

    assert "" not in blobs.head_calls
    assert len(blobs.head_calls) == 2
    assert verdict.issues == ()
    # サムネイルが無い以上 intact ではない
    assert verdict.is_intact is False


def test_none_record_is_rejected():
    with pytest.raises(ValueError):
        evaluate(None, FakeBlobStore())


def test_expired_deadline_fails_before_probing(make_record):
    record = make_record()
    blobs = _store_for(record)
    expired = Deadline(expires_at=0.0, clock=lambda: 1.0)

    with pytest.raises(DeadlineExceeded):
        evaluate(record, blobs, deadline=expired)
    assert blobs.head_calls == []


def test_verdict_serializes_camel_case(make_record):
    record = make_record()
    data = evaluate(record, _store_for(record, skip=("path",))).model_dump(by_alias=True, mode="json")

    assert data["isIntact"] is False
    assert data["issues"] == ["original_missing"]
    assert data["perAsset"]["original"] == {
        "path": "photos/P1.jpg",
        "exists": False,
        "size": None,
        "error": None,
    }
