"""
Services Layer

Read-only page logic for the leaderboard site:
- Pure classifiers (format detection, game names, placements, rivals) take plain values
- Page builders take a Session and return dataclasses for the routes to serialize
- Nothing here writes to the database or knows about HTTP
"""
