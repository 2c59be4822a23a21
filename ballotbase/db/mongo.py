"""
MongoDB voter source for BallotBase.

Saved lists live in two collections: the list documents themselves and one
item per (list, voter) pair. Voters are stored in one collection per county,
keyed by state_voter_id.
"""

import datetime
from typing import Dict, Iterable, List

import pymongo
from pymongo.errors import PyMongoError

from ballotbase.config import MongoDBConfig
from ballotbase.log import get_logger
from ballotbase.model import VoterRecord, VoterSourceError

logger = get_logger(__name__)


def get_database(cfg: MongoDBConfig):
    """
    Connect to the configured database.

    Raises:
        VoterSourceError: If MongoDB integration is disabled
    """
    if not cfg.enabled:
        raise VoterSourceError("MongoDB integration is disabled in configuration")

    client = pymongo.MongoClient(cfg.uri, retryWrites=True)
    return client[cfg.database]


def _county_collection(county: str, cfg: MongoDBConfig) -> str:
    name = (county or "").lower()
    if name not in cfg.counties:
        raise VoterSourceError(f"Unknown county: {county}")
    return name


def fetch_list(list_id: str, cfg: MongoDBConfig) -> Dict:
    """
    Fetch a saved list document.

    Args:
        list_id: List identifier
        cfg: MongoDB configuration

    Returns:
        List document (name, description, ...)
    """
    db = get_database(cfg)
    try:
        doc = db[cfg.lists_collection].find_one({"_id": list_id})
    except PyMongoError as e:
        logger.error(f"Error fetching list {list_id}: {e}")
        raise VoterSourceError(f"Error fetching list {list_id}: {e}")

    if doc is None:
        raise VoterSourceError(f"List not found: {list_id}")
    return doc


def fetch_list_voters(list_id: str, cfg: MongoDBConfig) -> List[VoterRecord]:
    """
    Fetch the voters of a saved list, in list order.

    Each record gets a "county" key naming its partition. Items with an
    unknown county, or whose voter no longer exists, are logged and skipped.

    Args:
        list_id: List identifier
        cfg: MongoDB configuration

    Returns:
        Voter records
    """
    db = get_database(cfg)
    logger.info(f"Fetching voters for list {list_id}")

    try:
        items = list(db[cfg.list_items_collection].find({"list_id": list_id}))

        # Group ids by county so each partition is queried once
        by_county: Dict[str, List[str]] = {}
        for item in items:
            county = (item.get("county") or "").lower()
            if county not in cfg.counties:
                logger.warning(f"Voter {item.get('state_voter_id')} has unknown county {item.get('county')}, skipping")
                continue
            by_county.setdefault(county, []).append(item["state_voter_id"])

        found: Dict[tuple, VoterRecord] = {}
        for county, voter_ids in by_county.items():
            for doc in db[county].find({"state_voter_id": {"$in": voter_ids}}):
                doc.pop("_id", None)
                doc["county"] = county
                found[(county, doc["state_voter_id"])] = doc
    except PyMongoError as e:
        logger.error(f"Error fetching voters for list {list_id}: {e}")
        raise VoterSourceError(f"Error fetching voters for list {list_id}: {e}")

    voters = []
    for item in items:
        county = (item.get("county") or "").lower()
        if county not in by_county:
            continue
        voter = found.get((county, item["state_voter_id"]))
        if voter is None:
            logger.warning(f"Voter {item['state_voter_id']} not found in {county}, skipping")
            continue
        voters.append(voter)

    logger.info(f"Fetched {len(voters)} of {len(items)} voters for list {list_id}")
    return voters


def add_voters_to_list(list_id: str, county: str, voter_ids: Iterable[str], cfg: MongoDBConfig) -> int:
    """
    Add voters from one county to a saved list.

    Returns:
        Number of items inserted
    """
    county = _county_collection(county, cfg)
    now = datetime.datetime.now(datetime.timezone.utc)
    docs = [
        {"list_id": list_id, "state_voter_id": voter_id, "county": county.upper(), "added_at": now}
        for voter_id in voter_ids
    ]
    if not docs:
        return 0

    db = get_database(cfg)
    try:
        result = db[cfg.list_items_collection].insert_many(docs, ordered=False)
    except PyMongoError as e:
        logger.error(f"Error adding voters to list {list_id}: {e}")
        raise VoterSourceError(f"Error adding voters to list {list_id}: {e}")

    logger.info(f"Added {len(result.inserted_ids)} voters to list {list_id}")
    return len(result.inserted_ids)


def setup_mongodb(cfg: MongoDBConfig) -> None:
    """
    Create the indexes used by list lookups.
    """
    db = get_database(cfg)
    logger.info("Setting up MongoDB indexes")

    try:
        items = db[cfg.list_items_collection]
        items.create_index([("list_id", pymongo.ASCENDING)])
        items.create_index(
            [("list_id", pymongo.ASCENDING), ("county", pymongo.ASCENDING), ("state_voter_id", pymongo.ASCENDING)],
            unique=True,
        )
        for county in cfg.counties:
            db[county].create_index([("state_voter_id", pymongo.ASCENDING)], unique=True)
    except PyMongoError as e:
        logger.error(f"Error setting up MongoDB: {e}")
        raise VoterSourceError(f"Error setting up MongoDB: {e}")

    logger.info("MongoDB setup complete")
