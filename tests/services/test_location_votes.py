# mypy: ignore-errors
# tests/services/test_location_votes.py
"""Tests for location upvotes and location details."""

import pytest
from sqlalchemy import func, select

from community_maps.core.errors import NotFound
from community_maps.models import LocationVote
from community_maps.models.location import LOCATION_STATUS_APPROVED
from community_maps.services import location_votes


@pytest.fixture()
def approved_location(db_session, pending_location):
    pending_location.set_status(LOCATION_STATUS_APPROVED)
    db_session.commit()
    return pending_location


def test_toggle_adds_then_removes(db_session, approved_location, test_user) -> None:
    assert location_votes.toggle_upvote(db_session, approved_location.id, test_user.id) is True
    assert location_votes.has_upvoted(db_session, approved_location.id, test_user.id)

    assert location_votes.toggle_upvote(db_session, approved_location.id, test_user.id) is False
    assert not location_votes.has_upvoted(db_session, approved_location.id, test_user.id)
    rows = db_session.scalar(select(func.count()).select_from(LocationVote))
    assert rows == 0


def test_vote_counts(db_session, approved_location, test_user, other_user) -> None:
    location_votes.toggle_upvote(db_session, approved_location.id, test_user.id)
    location_votes.toggle_upvote(db_session, approved_location.id, other_user.id)

    assert location_votes.vote_counts(db_session, [approved_location.id, "other"]) == {
        approved_location.id: 2,
        "other": 0,
    }


def test_toggle_unknown_location(db_session, test_user) -> None:
    with pytest.raises(NotFound):
        location_votes.toggle_upvote(db_session, "missing", test_user.id)


def test_details_for_anonymous_viewer(db_session, approved_location, other_user) -> None:
    location_votes.toggle_upvote(db_session, approved_location.id, other_user.id)

    details = location_votes.get_location_details(db_session, approved_location.id)

    assert details.location.id == approved_location.id
    assert details.upvotes == 1
    assert details.has_upvoted is False


def test_details_reflect_viewer_vote(db_session, approved_location, test_user) -> None:
    location_votes.toggle_upvote(db_session, approved_location.id, test_user.id)
    details = location_votes.get_location_details(db_session, approved_location.id, test_user.id)
    assert details.upvotes == 1
    assert details.has_upvoted is True


def test_pending_location_hidden_from_strangers(
    db_session, pending_location, test_user, other_user
) -> None:
    with pytest.raises(NotFound):
        location_votes.get_location_details(db_session, pending_location.id)
    with pytest.raises(NotFound):
        location_votes.get_location_details(db_session, pending_location.id, "someone-else")

    # Submitter and map owner can still see it.
    assert location_votes.get_location_details(db_session, pending_location.id, other_user.id)
    assert location_votes.get_location_details(db_session, pending_location.id, test_user.id)
