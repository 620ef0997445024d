"""Type hints used in Arena Pairing."""

from typing import List, Literal, Optional, Tuple, Union

# A match slot: a player id, the "BYE" marker, or None while undetermined
Slot = Optional[str]
Slots = Tuple[Slot, Slot]

# Literal form of the bye marker (for type hints)
ByeMarker = Literal["BYE"]

# Entry of an opponent history: a player id or the bye marker
OpponentEntry = Union[str, ByeMarker]
OpponentHistory = List[OpponentEntry]

# A pairing proposed by the Swiss engine: (first id, second id, rematch flag)
ProposedPairing = Tuple[str, str, bool]

# Ordered player ids, best first
Ranking = List[str]
