"""
User Repository - MongoDB Data Access Layer
============================================

Users are keyed by googleId; email is unique and stored lower-cased.
"""

from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
import logging
import re

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from ...common.exceptions import ConflictError
from ...core.mongodb_client import get_mongodb_client
from ...model.mongo.user import User
from .interfaces import UserRepositoryInterface
from .trip_repository import to_object_id, serialize

logger = logging.getLogger(__name__)

COLLECTION_NAME = "users"

SUMMARY_PROJECTION = {"name": 1, "email": 1, "photo": 1}


class UserRepository(UserRepositoryInterface):
    """Repository for user documents."""

    def __init__(self, collection: Optional[Collection] = None):
        if collection is None:
            collection = get_mongodb_client().get_collection(COLLECTION_NAME)
        self.collection = collection

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return serialize(self.collection.find_one({"_id": oid}))

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return serialize(self.collection.find_one({"email": email.strip().lower()}))

    def get_by_google_id(self, google_id: str) -> Optional[Dict[str, Any]]:
        return serialize(self.collection.find_one({"googleId": google_id}))

    def upsert_google_user(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(tz=timezone.utc)
        user = User(**profile, last_login=now)
        doc = user.to_document()

        # Refresh profile fields on every login, keep local state on insert only
        on_insert = {
            "isActive": doc.pop("isActive"),
            "preferences": doc.pop("preferences"),
            "createdAt": doc.pop("createdAt"),
            "refreshToken": doc.pop("refreshToken"),
        }
        doc["updatedAt"] = now

        try:
            stored = self.collection.find_one_and_update(
                {"googleId": doc["googleId"]},
                {"$set": doc, "$setOnInsert": on_insert},
                upsert=True,
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            raise ConflictError(
                "Email is already linked to another account",
                details={"email": doc["email"]}
            ) from e

        logger.info(f"[INFO] Google user signed in: {doc['email']}")
        return serialize(stored)

    def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        update = dict(fields)
        update["updatedAt"] = datetime.now(tz=timezone.utc)
        return serialize(self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER
        ))

    def update_preferences(self, user_id: str, preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        update = {}
        for key, value in preferences.items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    update[f"preferences.{key}.{sub_key}"] = sub_value
            else:
                update[f"preferences.{key}"] = value
        return self.update_profile(user_id, update)

    def deactivate(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        result = self.collection.update_one(
            {"_id": oid},
            {"$set": {"isActive": False, "updatedAt": datetime.now(tz=timezone.utc)}}
        )
        if result.matched_count:
            logger.info(f"[INFO] Deactivated user: {user_id}")
        return result.matched_count > 0

    def search(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        pattern = re.escape(query)
        cursor = self.collection.find(
            {
                "isActive": True,
                "$or": [
                    {"name": {"$regex": pattern, "$options": "i"}},
                    {"email": {"$regex": pattern, "$options": "i"}},
                ]
            },
            SUMMARY_PROJECTION
        ).limit(limit)
        return [serialize(doc) for doc in cursor]

    def get_summaries(self, user_ids: List[str]) -> List[Dict[str, Any]]:
        oids = [oid for oid in (to_object_id(uid) for uid in user_ids) if oid is not None]
        if not oids:
            return []
        found = {
            str(doc["_id"]): serialize(doc)
            for doc in self.collection.find({"_id": {"$in": oids}}, SUMMARY_PROJECTION)
        }
        return [found[uid] for uid in user_ids if uid in found]
