#!/usr/bin/env python3
"""
MongoDB Wrapper Example

Demonstrates MongoDatabase: connect, insert, find and remove, asynchronously and through the
synchronous wrappers.

Prerequisites:
- MongoDB running on localhost:27017
"""

import asyncio

from mongowrap.database import ConnectionDescriptor, ConnectionFailedError, MongoDatabase

URI = "mongodb://localhost:27017/sampleapp"


async def demonstrate_async_operations():
    """Demonstrate asynchronous operations (native for MongoDB)."""
    print("\n" + "=" * 70)
    print("MONGODB WRAPPER - ASYNCHRONOUS OPERATIONS")
    print("=" * 70)

    async with MongoDatabase(URI, "sampleapp", debug=True, collection="users") as db:
        print(f"✓ Connected: {db!r}")

        print("\n--- INSERT ---")
        alice_id = await db.insert({"name": "Alice Johnson", "age": 30, "skills": ["Python", "MongoDB"]})
        print(f"✓ Inserted Alice (ID: {alice_id})")
        ids = await db.insert([{"name": "Bob Smith", "age": 25}, {"name": "Carol White", "age": 41}])
        print(f"✓ Inserted {len(ids)} more users")

        print("\n--- FIND ---")
        everyone = await db.find()
        print(f"✓ Total users: {len(everyone)}")
        mature = await db.find({"age": {"$gte": 30}}, sort=[("age", 1)])
        for user in mature:
            print(f"  - {user['name']}, age {user['age']}")

        print("\n--- REMOVE ---")
        removed = await db.remove({"name": {"$in": ["Alice Johnson", "Bob Smith", "Carol White"]}})
        print(f"✓ Removed {removed} user(s)")


def demonstrate_sync_operations():
    """Demonstrate synchronous operations (wrapper for MongoDB)."""
    print("\n" + "=" * 70)
    print("MONGODB WRAPPER - SYNCHRONOUS OPERATIONS")
    print("=" * 70)

    db = MongoDatabase(URI, "sampleapp", collection="users")
    doc_id = db.insert_sync({"name": "Dan Brown", "age": 52})
    print(f"✓ Inserted Dan (ID: {doc_id})")
    print(f"✓ Found {len(db.find_sync({'name': 'Dan Brown'}))} matching user(s)")
    print(f"✓ Removed {db.remove_sync({'_id': doc_id})} user(s)")
    db.close_sync()


async def demonstrate_connection_failure():
    """Connecting to a port with nothing listening rejects with ConnectionFailedError."""
    print("\n" + "=" * 70)
    print("MONGODB WRAPPER - CONNECTION FAILURE")
    print("=" * 70)

    descriptor = ConnectionDescriptor.from_parts("database", "database", "localhost", 27018, "database")
    db = MongoDatabase(descriptor.uri, descriptor.db_name, client_kwargs={"serverSelectionTimeoutMS": 1000})
    try:
        await db.connect()
    except ConnectionFailedError as e:
        print(f"✓ Connection rejected: {e}")


if __name__ == "__main__":
    asyncio.run(demonstrate_async_operations())
    demonstrate_sync_operations()
    asyncio.run(demonstrate_connection_failure())
