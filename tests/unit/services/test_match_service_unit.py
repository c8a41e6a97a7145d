"""Unit tests for the match service using MockDatabase."""
import pytest

from lfm.db.models import MatchStatus
from lfm.errors import NotFoundError
from lfm.match.quality import MatchQuality
from lfm.services.match_service import (
    find_matches,
    get_match_with_details,
    get_user_matches,
    run_matching,
    update_match_status,
)
from tests.mocks.fixtures import make_item


@pytest.fixture
def cfg():
    return {
        'matching': {'min_similarity': 0.3},
        'logging': {'progress_enabled': False, 'progress_interval': 1},
    }


@pytest.fixture
def populated(mock_db, sample_lost, sample_found):
    mock_db.upsert_item(sample_lost)
    mock_db.upsert_item(sample_found)
    # identical twin of found-1 except for the place: scores higher than found-1
    mock_db.upsert_item(make_item(
        "found-2", "found",
        category="electronics",
        title=sample_lost.title,
        description=sample_lost.description,
        tags=sample_lost.tags,
        location_name="Riverside Park",
        user_id="finder",
    ))
    mock_db.upsert_item(make_item("found-3", "found", category="pets", title="dog", description="collar",
                                  tags=["dog"], location_name="Airport"))
    return mock_db


def test_run_matching_creates_and_counts(populated, cfg):
    result = run_matching(populated, cfg)

    assert result.matched == 2
    assert result.lost_items == 1
    assert result.found_items == 3
    assert result.total_matches == 2
    assert result.tier_counts == {"excellent": 1, "good": 1}
    assert populated.get_meta('last_match_epoch') is not None
    assert populated.commits >= 2


def test_run_matching_twice_adds_nothing(populated, cfg):
    run_matching(populated, cfg)
    again = run_matching(populated, cfg)

    assert again.matched == 0
    assert again.tier_counts == {}
    assert again.total_matches == 2


def test_find_matches_does_not_persist(populated, cfg):
    ranked = find_matches(populated, cfg, "lost-1")

    assert [m.found_item_id for m in ranked] == ["found-2", "found-1"]
    assert populated.count_matches() == 0


def test_find_matches_unknown_item(mock_db, cfg):
    with pytest.raises(NotFoundError):
        find_matches(mock_db, cfg, "ghost")


def test_get_match_with_details(populated, cfg):
    created = run_matching(populated, cfg).created
    details = get_match_with_details(populated, created[0].id)

    assert details.match.id == created[0].id
    assert details.lost_item.id == "lost-1"
    assert details.found_item.id == created[0].found_item_id
    assert details.quality.tier in set(MatchQuality)


def test_get_match_with_details_unknown(mock_db):
    with pytest.raises(NotFoundError):
        get_match_with_details(mock_db, "m404")


def test_update_match_status(populated, cfg):
    created = run_matching(populated, cfg).created
    commits = populated.commits

    updated = update_match_status(populated, created[0].id, "confirmed", "owner verified")

    assert updated.status is MatchStatus.CONFIRMED
    assert updated.notes == "owner verified"
    assert populated.commits == commits + 1
    kept = update_match_status(populated, created[0].id, MatchStatus.CONTACTED)
    assert kept.notes == "owner verified"


def test_update_match_status_unknown_match(mock_db):
    with pytest.raises(NotFoundError):
        update_match_status(mock_db, "m404", MatchStatus.REJECTED)


def test_update_match_status_invalid_status(populated, cfg):
    created = run_matching(populated, cfg).created
    with pytest.raises(ValueError):
        update_match_status(populated, created[0].id, "archived")


def test_get_user_matches_deduplicates(mock_db):
    mock_db.upsert_item(make_item("L1", "lost", user_id="sam"))
    mock_db.upsert_item(make_item("F1", "found", user_id="sam"))
    mock_db.upsert_item(make_item("F2", "found", user_id="kim"))
    mock_db.add_match("L1", "F1", 0.9, [])
    mock_db.add_match("L1", "F2", 0.8, [])

    sams = get_user_matches(mock_db, "sam")
    kims = get_user_matches(mock_db, "kim")

    assert [m.found_item_id for m in sams] == ["F1", "F2"]
    assert [m.found_item_id for m in kims] == ["F2"]
    assert get_user_matches(mock_db, "nobody") == []
