"""
Constants for the model storage plugins.

This module defines constants used by the storage implementations:
- File names
- SQL schema definition of the version table
- SQL queries
"""

# JSON filesystem storage file
MODELS_FILE = "models.json"

# SQLite database file
STORAGEDB = "models.db"

# SQL Schema Definitions

MODEL_VERSIONS_SCHEMA = """
CREATE TABLE IF NOT EXISTS model_versions (
    name TEXT NOT NULL,
    version INTEGER NOT NULL,
    model TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (name, version)
)
"""

# SQL Queries

SELECT_VERSION = """
SELECT name, version, model, created_at FROM model_versions
WHERE name = ? AND version = ?
"""
SELECT_LATEST_VERSION = """
SELECT name, version, model, created_at FROM model_versions
WHERE name = ?
ORDER BY version DESC
LIMIT 1
"""
SELECT_VERSION_NUMBERS = "SELECT version FROM model_versions WHERE name = ? ORDER BY version DESC"
INSERT_VERSION = """
INSERT INTO model_versions (name, version, model, created_at)
VALUES (?, ?, ?, ?)
"""
DELETE_MODEL = "DELETE FROM model_versions WHERE name = ?"
