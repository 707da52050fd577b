"""
Territorial Conquest Rules Engine
Core engine without rendering, input handling, persistence, or AI players.
"""

# Star card deck at game start
SINGLE_STAR_CARDS = 30
DOUBLE_STAR_CARDS = 12

MIN_PLAYERS = 2
MAX_PLAYERS = 6

# Initial armies: 40 for 2 players, 35 for 3, ... 20 for 6
INITIAL_ARMIES_BASE = 40
INITIAL_ARMIES_STEP = 5

# Draft: one army per TERRITORIES_PER_ARMY territories owned, never fewer than MIN_DRAFT_ARMIES
MIN_DRAFT_ARMIES = 3
TERRITORIES_PER_ARMY = 3

MAX_ATTACKERS = 3
MAX_DEFENDERS = 2

# Bonus armies for trading in 2..10 stars
ARMIES_FOR_STARS = (2, 4, 7, 10, 13, 17, 21, 25, 30)
MIN_TRADE_STARS = 2
MAX_TRADE_STARS = 10
