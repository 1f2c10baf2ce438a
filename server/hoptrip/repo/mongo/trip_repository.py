"""
Trip Repository - MongoDB Data Access Layer
============================================

Purpose:
- CRUD operations for trips
- Atomic nested-array mutations (array-filter $push/$pull) so that two
  members editing the same trip never overwrite each other's entries
- Membership queries, pagination and public search
"""

from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
import logging
import re

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from ...core.mongodb_client import get_mongodb_client
from .interfaces import TripRepositoryInterface

logger = logging.getLogger(__name__)

COLLECTION_NAME = "trips"


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a hex id; None when malformed or missing."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Expose the ObjectId `_id` as a hex string."""
    if doc is not None and isinstance(doc.get("_id"), ObjectId):
        doc["_id"] = str(doc["_id"])
    return doc


class TripRepository(TripRepositoryInterface):
    """
    Repository for trip documents.

    Features:
    - Create / get / update / delete
    - Guarded traveler push (no duplicates, even under concurrent adds)
    - Activity push/pull inside a specific itinerary day via array_filters
    - Place and expense push/pull by sub-document id
    """

    def __init__(self, collection: Optional[Collection] = None):
        """
        Args:
            collection: pymongo collection; defaults to the shared client's `trips`
        """
        if collection is None:
            collection = get_mongodb_client().get_collection(COLLECTION_NAME)
        self.collection = collection

    @staticmethod
    def _member_filter(user_id: str) -> Dict[str, Any]:
        return {"$or": [{"host": user_id}, {"travelers": user_id}]}

    def create(self, trip_doc: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(trip_doc)
        doc.pop("_id", None)
        result = self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        logger.info(f"[INFO] Created trip: {doc['_id']} (host: {doc.get('host')})")
        return doc

    def get_by_id(self, trip_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        return serialize(self.collection.find_one({"_id": oid}))

    def find_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        visibility: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> List[Dict[str, Any]]:
        query = self._member_filter(user_id)
        if status:
            query["status"] = status
        if visibility:
            query["visibility"] = visibility

        cursor = self.collection.find(query).sort("createdAt", DESCENDING).skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [serialize(doc) for doc in cursor]

    def count_for_user(self, user_id: str, status: Optional[str] = None) -> int:
        query = self._member_filter(user_id)
        if status:
            query["status"] = status
        return self.collection.count_documents(query)

    def update_fields(self, trip_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        update = dict(fields)
        update["updatedAt"] = datetime.now(tz=timezone.utc)
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER
        )
        return serialize(doc)

    def delete(self, trip_id: str) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info(f"[INFO] Deleted trip: {trip_id}")
        return result.deleted_count > 0

    # ============================================
    # Travelers
    # ============================================

    def add_traveler(self, trip_id: str, user_id: str) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        # Filter on absence so the check and the push are one atomic step
        result = self.collection.update_one(
            {"_id": oid, "travelers": {"$ne": user_id}},
            {"$push": {"travelers": user_id}, "$set": {"updatedAt": datetime.now(tz=timezone.utc)}}
        )
        return result.modified_count > 0

    def remove_traveler(self, trip_id: str, user_id: str) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        result = self.collection.update_one(
            {"_id": oid},
            {"$pull": {"travelers": user_id}, "$set": {"updatedAt": datetime.now(tz=timezone.utc)}}
        )
        return result.matched_count > 0

    # ============================================
    # Itinerary
    # ============================================

    def push_activity(self, trip_id: str, date: str, activity: Dict[str, Any]) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        result = self.collection.update_one(
            {"_id": oid, "itinerary.date": date},
            {
                "$push": {"itinerary.$[entry].activities": activity},
                "$set": {"updatedAt": datetime.now(tz=timezone.utc)}
            },
            array_filters=[{"entry.date": date}]
        )
        return result.matched_count > 0

    def pull_activity(self, trip_id: str, date: str, activity_id: str) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        result = self.collection.update_one(
            {"_id": oid, "itinerary.date": date},
            {
                "$pull": {"itinerary.$[entry].activities": {"_id": activity_id}},
                "$set": {"updatedAt": datetime.now(tz=timezone.utc)}
            },
            array_filters=[{"entry.date": date}]
        )
        return result.matched_count > 0

    # ============================================
    # Places & expenses
    # ============================================

    def _array_update(self, trip_id: str, operator: str, field: str, value) -> Optional[Dict[str, Any]]:
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {operator: {field: value}, "$set": {"updatedAt": datetime.now(tz=timezone.utc)}},
            return_document=ReturnDocument.AFTER
        )
        return serialize(doc)

    def push_place(self, trip_id: str, place: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._array_update(trip_id, "$push", "placesToVisit", place)

    def pull_place(self, trip_id: str, place_id: str) -> Optional[Dict[str, Any]]:
        return self._array_update(trip_id, "$pull", "placesToVisit", {"_id": place_id})

    def push_expense(self, trip_id: str, expense: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._array_update(trip_id, "$push", "expenses", expense)

    def pull_expense(self, trip_id: str, expense_id: str) -> Optional[Dict[str, Any]]:
        return self._array_update(trip_id, "$pull", "expenses", {"_id": expense_id})

    # ============================================
    # Discovery
    # ============================================

    def search_public(
        self,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
        status: Optional[str] = None,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        filters: Dict[str, Any] = {"visibility": "public"}
        if query:
            pattern = re.escape(query)
            filters["$or"] = [
                {"tripName": {"$regex": pattern, "$options": "i"}},
                {"notes": {"$regex": pattern, "$options": "i"}},
            ]
        if tags:
            filters["tags"] = {"$in": tags}
        if status:
            filters["status"] = status

        cursor = self.collection.find(filters).sort("createdAt", DESCENDING).limit(limit)
        return [serialize(doc) for doc in cursor]

    def find_public_for_user(self, user_id: str, skip: int = 0, limit: int = 10) -> List[Dict[str, Any]]:
        return self.find_for_user(user_id, visibility="public", skip=skip, limit=limit)
