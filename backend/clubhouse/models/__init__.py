from clubhouse.models.match import Match
from clubhouse.models.match_player import MatchPlayer
from clubhouse.models.payment import Payment
from clubhouse.models.player import Player

__all__ = [
    "Match",
    "MatchPlayer",
    "Payment",
    "Player",
]
