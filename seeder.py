import json
import logging
import os
import sys

from config.configrations import Settings, create_client
from config.logger import setup_logging
from services.config import USERS
from services.database import ResourceAccessor
from services.errors import InvalidPath
from services.passwords import PasswordHasher

log = logging.getLogger(__name__)

SEED_DIR = os.path.join(os.path.dirname(__file__), 'seed')


def parse_seed_file(filepath):
    """Return ``(collection_name, records)`` for a ``<collection>.json`` file."""
    collection_name = os.path.splitext(os.path.basename(filepath))[0]
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.error("Error parsing %s: %s", filepath, e)
        return None, None

    # Normalize to list
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        log.error("%s must hold a JSON object or an array of objects", filepath)
        return None, None
    return collection_name, data


def seed_records(store, collection_name, records, passwords=None):
    """Write records into a collection and return how many were stored.

    Records with an ``id`` are written in place so re-seeding does not
    duplicate them; the rest get a generated key.
    """
    count = 0
    for record in records:
        record = dict(record)
        if collection_name == USERS and passwords is not None and record.get("password"):
            record["password"] = passwords.hash(record["password"])

        record_id = record.pop("id", None)
        if record_id:
            store.set_at(f"{collection_name}/{record_id}", record)
        else:
            store.push(collection_name, record)
        count += 1
    return count


def seed(store, seed_dir=SEED_DIR, passwords=None):
    if not os.path.isdir(seed_dir):
        log.error("Directory %s not found.", seed_dir)
        return {}

    files = sorted(f for f in os.listdir(seed_dir) if f.endswith('.json'))
    log.info("Found seed files: %s", files)

    seeded = {}
    for filename in files:
        collection_name, data = parse_seed_file(os.path.join(seed_dir, filename))
        if not collection_name or not data:
            log.warning("Skipping %s (parse failed or empty)", filename)
            continue
        try:
            seeded[collection_name] = seed_records(store, collection_name, data, passwords)
        except InvalidPath as e:
            log.error("Skipping %s: %s", filename, e)
            continue
        log.info("Inserted %d records into %s.", seeded[collection_name], collection_name)
    return seeded


if __name__ == '__main__':
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    client = create_client(settings)
    try:
        store = ResourceAccessor(client[settings.database_name])
        seed_dir = sys.argv[1] if len(sys.argv) > 1 else SEED_DIR
        seed(store, seed_dir, PasswordHasher(settings.bcrypt_rounds))
    finally:
        client.close()
