"""Example usage of the json_tables library."""

from pathlib import Path

from json_tables import StorageConfig, Table, open_storage

# Create a store next to this script
db_file = Path("./example_data/db.json")

with open_storage(StorageConfig(file_path=db_file)) as storage:
    storage.reset()

    # Register participants one at a time
    print("Registering participants...")
    for name in ["Alice", "Bob", "Charlie", "Diana"]:
        participant_id = storage.insert(Table.PARTICIPANT, {"tournament_id": 0, "name": name})
        print(f"  {name} -> id {participant_id}")

    # Create the first round of matches in one batch
    matches = [
        {"round_id": 0, "number": 1, "status": 2, "opponent1": {"id": 0}, "opponent2": {"id": 1}},
        {"round_id": 0, "number": 2, "status": 2, "opponent1": {"id": 2}, "opponent2": {"id": 3}},
    ]
    storage.insert_many(Table.MATCH, matches)

    # Record a result: merge only the fields that change
    storage.update_where(
        Table.MATCH,
        {"round_id": 0, "number": 1},
        {"status": 4, "opponent1": {"score": 3, "result": "win"}},
    )

    print("\nMatch 1:")
    print(f"  {storage.select_by_id(Table.MATCH, 0)}")

    # Withdraw a participant
    storage.delete_where(Table.PARTICIPANT, {"name": "Diana"})

    print("\nRemaining participants:")
    for participant in storage.select_all(Table.PARTICIPANT) or []:
        print(f"  {participant['id']}: {participant['name']}")
