"""
Read-only trip snapshot loader.

Fetches a trip and everything the consensus engine needs in one pass. The
engine never queries the database itself; callers load a fresh snapshot after
every write instead of caching summaries.
"""

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ValidationError

from app.db.database import (
    get_date_reactions_collection,
    get_date_windows_collection,
    get_trips_collection,
    get_votes_collection,
)
from app.models.date_window import DateWindow
from app.models.trip import Traveler, Trip, TripSnapshot
from app.models.vote import DateReaction, Vote


async def find_trip_document(trip_id: str) -> dict | None:
    """Look a trip up by ObjectId, then by its 6-character trip code"""
    trips = get_trips_collection()
    try:
        trip_doc = await trips.find_one({"_id": ObjectId(trip_id)})
    except (InvalidId, TypeError):
        trip_doc = await trips.find_one({"trip_code": str(trip_id).upper()})
    return trip_doc


def _with_string_id(doc: dict, field: str) -> dict:
    doc = dict(doc)
    if "_id" in doc:
        doc.setdefault(field, str(doc.pop("_id")))
    return doc


def _parse_documents(model: type[BaseModel], docs: list[dict], id_field: str | None = None) -> list:
    parsed = []
    for doc in docs:
        if id_field:
            doc = _with_string_id(doc, id_field)
        else:
            doc = {k: v for k, v in doc.items() if k != "_id"}
        try:
            parsed.append(model.model_validate(doc))
        except ValidationError as e:
            print(f"[db] Skipping malformed {model.__name__} document: {e.error_count()} error(s)")
    return parsed


def _travelers_from(trip_doc: dict) -> list[Traveler]:
    names = trip_doc.get("member_names") or {}
    return [
        Traveler(user_id=user_id, name=names.get(user_id))
        for user_id in trip_doc.get("members", [])
        if user_id
    ]


async def load_trip_snapshot(trip_id: str) -> TripSnapshot | None:
    """
    Load the trip plus its windows, votes and reactions.
    Returns None when the trip does not exist.
    """
    trip_doc = await find_trip_document(trip_id)
    if not trip_doc:
        return None

    trip_doc = _with_string_id(trip_doc, "trip_id")
    trip = Trip.model_validate(trip_doc)
    key = trip.trip_id

    windows_docs = await get_date_windows_collection().find({"trip_id": key}).sort("created_at", 1).to_list(length=None)
    votes_docs = await get_votes_collection().find({"trip_id": key}).to_list(length=None)
    reactions_docs = await get_date_reactions_collection().find({"trip_id": key}).to_list(length=None)

    snapshot = TripSnapshot(
        trip=trip,
        travelers=_travelers_from(trip_doc),
        windows=_parse_documents(DateWindow, windows_docs, id_field="id"),
        votes=_parse_documents(Vote, votes_docs),
        reactions=_parse_documents(DateReaction, reactions_docs),
    )
    print(
        f"[db] Loaded snapshot for trip {key}: {len(snapshot.windows)} windows, "
        f"{len(snapshot.votes)} votes, {len(snapshot.reactions)} reactions"
    )
    return snapshot
