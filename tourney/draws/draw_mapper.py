"""
Map models
"""

from typing import List
from tourney.draws.draw_data_class import Player
from tourney.draws.draw_models import Entrant


def map_player_to_entrant(player: Player) -> Entrant:
    """
    Map a Player of the roster to an Entrant of the draw. A seed number of 0 or less means not seeded
    """
    seed_number = player.seed_number if player.seed_number is not None and player.seed_number > 0 else None
    return Entrant(id=player.id, name=player.name, seed_number=seed_number)


def map_players_to_entrants(players: List[Player]) -> List[Entrant]:
    """
    Map the roster keeping its order
    """
    return [map_player_to_entrant(player) for player in players]
