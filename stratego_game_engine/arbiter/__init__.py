"""
Arbiter clients: the remote authority for setups, combat and opponent moves.
"""

from stratego_game_engine.arbiter.arbiter_client import ArbiterClient, TransportError
from stratego_game_engine.arbiter.scripted_client import ScriptedArbiter

__all__ = ['ArbiterClient', 'TransportError', 'ScriptedArbiter']
