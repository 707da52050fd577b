"""
A small built-in geography: nine territories in three regions.
Used by main.py and the tests.

Handles (in order): 0 frostmark, 1 pinegate, 2 icefall, 3 dunmere, 4 saltflat,
5 redcliff, 6 sunreach, 7 ashford, 8 wolfden.
"""

from risky.engine.definitions import Geography, geography_from_snapshot

SAMPLE_SNAPSHOT = {
    "regions": [
        {"name": "north", "bonus": 2, "territories": ["frostmark", "pinegate", "icefall"]},
        {"name": "south", "bonus": 3, "territories": ["dunmere", "saltflat", "redcliff", "sunreach"]},
        {"name": "east", "bonus": 1, "territories": ["ashford", "wolfden"]},
    ],
    "links": [
        ["frostmark", "pinegate"],
        ["frostmark", "icefall"],
        ["pinegate", "icefall"],
        ["pinegate", "dunmere"],
        ["icefall", "ashford"],
        ["dunmere", "saltflat"],
        ["dunmere", "sunreach"],
        ["saltflat", "redcliff"],
        ["redcliff", "sunreach"],
        ["redcliff", "ashford"],
        ["sunreach", "wolfden"],
        ["ashford", "wolfden"],
    ],
}


def load_sample_geography() -> Geography:
    return geography_from_snapshot(SAMPLE_SNAPSHOT)
