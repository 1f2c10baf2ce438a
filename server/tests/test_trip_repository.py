"""pymongo repositories against a MagicMock collection: the exact operators issued."""
from datetime import timezone
from unittest.mock import MagicMock

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
import pytest

from hoptrip.common.exceptions import ConflictError
from hoptrip.repo.mongo.trip_repository import TripRepository, to_object_id
from hoptrip.repo.mongo.user_repository import UserRepository

TRIP_ID = str(ObjectId())


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def repo(collection):
    return TripRepository(collection)


def test_to_object_id_rejects_malformed_ids():
    assert to_object_id("not-an-id") is None
    assert to_object_id(None) is None
    assert to_object_id(TRIP_ID) == ObjectId(TRIP_ID)


def test_malformed_id_never_queries(repo, collection):
    assert repo.get_by_id("nope") is None
    assert repo.add_traveler("nope", "u1") is False
    assert repo.push_place("nope", {"_id": "p"}) is None
    collection.find_one.assert_not_called()
    collection.update_one.assert_not_called()


def test_create_returns_hex_id(repo, collection):
    oid = ObjectId()
    inserted = []
    collection.insert_one.side_effect = lambda doc: (inserted.append(dict(doc)), MagicMock(inserted_id=oid))[1]

    created = repo.create({"_id": "client-id", "tripName": "Paris", "host": "u1"})

    assert created["_id"] == str(oid)
    assert inserted == [{"tripName": "Paris", "host": "u1"}]


def test_get_by_id_serializes_object_id(repo, collection):
    collection.find_one.return_value = {"_id": ObjectId(TRIP_ID), "tripName": "Paris"}
    assert repo.get_by_id(TRIP_ID) == {"_id": TRIP_ID, "tripName": "Paris"}
    collection.find_one.assert_called_once_with({"_id": ObjectId(TRIP_ID)})


def test_add_traveler_is_a_guarded_push(repo, collection):
    collection.update_one.return_value.modified_count = 1

    assert repo.add_traveler(TRIP_ID, "u2") is True

    query, update = collection.update_one.call_args[0]
    assert query == {"_id": ObjectId(TRIP_ID), "travelers": {"$ne": "u2"}}
    assert update["$push"] == {"travelers": "u2"}


def test_add_traveler_reports_lost_race(repo, collection):
    collection.update_one.return_value.modified_count = 0
    assert repo.add_traveler(TRIP_ID, "u2") is False


def test_remove_traveler_pulls_by_id(repo, collection):
    collection.update_one.return_value.matched_count = 1
    assert repo.remove_traveler(TRIP_ID, "u2") is True
    assert collection.update_one.call_args[0][1]["$pull"] == {"travelers": "u2"}


def test_push_activity_targets_day_with_array_filter(repo, collection):
    collection.update_one.return_value.matched_count = 1
    activity = {"_id": "a1", "name": "Louvre"}

    assert repo.push_activity(TRIP_ID, "2024-06-02", activity) is True

    args, kwargs = collection.update_one.call_args
    assert args[0] == {"_id": ObjectId(TRIP_ID), "itinerary.date": "2024-06-02"}
    assert args[1]["$push"] == {"itinerary.$[entry].activities": activity}
    assert kwargs["array_filters"] == [{"entry.date": "2024-06-02"}]


def test_push_activity_without_matching_day(repo, collection):
    collection.update_one.return_value.matched_count = 0
    assert repo.push_activity(TRIP_ID, "2030-01-01", {"_id": "a1", "name": "x"}) is False


def test_pull_activity_uses_array_filter(repo, collection):
    collection.update_one.return_value.matched_count = 1
    repo.pull_activity(TRIP_ID, "2024-06-02", "a1")

    args, kwargs = collection.update_one.call_args
    assert args[1]["$pull"] == {"itinerary.$[entry].activities": {"_id": "a1"}}
    assert kwargs["array_filters"] == [{"entry.date": "2024-06-02"}]


@pytest.mark.parametrize("method,operator,field,value,expected", [
    ("push_place", "$push", "placesToVisit", {"_id": "p1", "name": "Eiffel"}, {"_id": "p1", "name": "Eiffel"}),
    ("pull_place", "$pull", "placesToVisit", "p1", {"_id": "p1"}),
    ("push_expense", "$push", "expenses", {"_id": "e1", "price": 4}, {"_id": "e1", "price": 4}),
    ("pull_expense", "$pull", "expenses", "e1", {"_id": "e1"}),
])
def test_nested_array_updates(repo, collection, method, operator, field, value, expected):
    collection.find_one_and_update.return_value = {"_id": ObjectId(TRIP_ID), field: []}

    result = getattr(repo, method)(TRIP_ID, value)

    args, kwargs = collection.find_one_and_update.call_args
    assert args[1][operator] == {field: expected}
    assert args[1]["$set"]["updatedAt"].tzinfo == timezone.utc
    assert kwargs["return_document"] == ReturnDocument.AFTER
    assert result["_id"] == TRIP_ID


def test_find_for_user_matches_host_or_traveler(repo, collection):
    cursor = collection.find.return_value.sort.return_value.skip.return_value
    cursor.limit.return_value = iter([{"_id": ObjectId(TRIP_ID)}])

    trips = repo.find_for_user("u1", status="planning", skip=10, limit=5)

    assert trips == [{"_id": TRIP_ID}]
    collection.find.assert_called_once_with(
        {"$or": [{"host": "u1"}, {"travelers": "u1"}], "status": "planning"}
    )
    collection.find.return_value.sort.assert_called_once_with("createdAt", DESCENDING)
    collection.find.return_value.sort.return_value.skip.assert_called_once_with(10)
    cursor.limit.assert_called_once_with(5)


def test_search_public_escapes_query(repo, collection):
    collection.find.return_value.sort.return_value.limit.return_value = iter([])

    repo.search_public(query="a.b*", tags=["food"], status="planning", limit=20)

    filters = collection.find.call_args[0][0]
    assert filters["visibility"] == "public"
    assert filters["$or"][0] == {"tripName": {"$regex": r"a\.b\*", "$options": "i"}}
    assert filters["tags"] == {"$in": ["food"]}
    assert filters["status"] == "planning"
    collection.find.return_value.sort.return_value.limit.assert_called_once_with(20)


def test_user_upsert_keeps_local_state_on_insert_only():
    collection = MagicMock()
    collection.find_one_and_update.return_value = {"_id": ObjectId(TRIP_ID), "email": "dana@example.com"}

    user = UserRepository(collection).upsert_google_user({
        "googleId": "g-1", "email": "Dana@Example.com", "name": "Dana",
    })

    query, update = collection.find_one_and_update.call_args[0]
    kwargs = collection.find_one_and_update.call_args[1]
    assert query == {"googleId": "g-1"}
    assert update["$set"]["email"] == "dana@example.com"
    assert "lastLogin" in update["$set"]
    assert update["$setOnInsert"]["isActive"] is True
    assert "isActive" not in update["$set"]
    assert kwargs["upsert"] is True
    assert user["_id"] == TRIP_ID


def test_user_upsert_email_clash_is_conflict():
    collection = MagicMock()
    collection.find_one_and_update.side_effect = DuplicateKeyError("dup")
    with pytest.raises(ConflictError):
        UserRepository(collection).upsert_google_user({"googleId": "g-2", "email": "a@b.co", "name": "A"})


def test_user_summaries_keep_requested_order():
    first, second = ObjectId(), ObjectId()
    collection = MagicMock()
    collection.find.return_value = [{"_id": second, "name": "B"}, {"_id": first, "name": "A"}]

    summaries = UserRepository(collection).get_summaries([str(first), "bogus", str(second)])

    assert [s["name"] for s in summaries] == ["A", "B"]
    assert collection.find.call_args[0][0] == {"_id": {"$in": [first, second]}}
