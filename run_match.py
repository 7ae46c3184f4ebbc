"""
Script to play a complete Stratego match against a scripted arbiter.
"""

import logging
import sys
import os
import argparse
from dotenv import load_dotenv
from stratego_game_engine.arbiter import ScriptedArbiter, TransportError
from stratego_game_engine.core.errors import EngineError
from stratego_game_engine.core.phase_manager import PhaseManager
from stratego_game_engine.gamemaster import Gamemaster, MoveWriter
from stratego_game_engine.io.yaml_moves import YAMLMatchLoader, ScriptValidationError

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.getenv('LOG_FILE', 'match.log')),
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def main():
    """Play one scripted match."""

    # Parse command line arguments
    parser = argparse.ArgumentParser(description='Play a Stratego match against a scripted arbiter')
    parser.add_argument('--script', default=os.getenv('MATCH_SCRIPT'),
                       help='YAML match script (default: $MATCH_SCRIPT)')
    parser.add_argument('--max-attempts', type=int,
                       default=int(os.getenv('MAX_SUBMIT_ATTEMPTS', '3')),
                       help='Attempts per arbiter exchange (default: $MAX_SUBMIT_ATTEMPTS or 3)')
    parser.add_argument('--show-boards', action='store_true',
                       help='Print the board after the match')
    parser.add_argument('--write-log', metavar='PATH',
                       help='Write the move history as a match script')
    args = parser.parse_args()

    if not args.script:
        parser.error("no match script given (use --script or set MATCH_SCRIPT)")

    logger.info("=" * 60)
    logger.info("STRATEGO MATCH")
    logger.info("=" * 60)
    logger.info(f"Script: {args.script}")
    logger.info(f"Max attempts per exchange: {args.max_attempts}")

    loader = YAMLMatchLoader()
    try:
        script = loader.parse_script(loader.load_from_file(args.script))
    except (OSError, ScriptValidationError) as e:
        logger.error(f"Cannot load match script: {e}")
        sys.exit(1)

    for warning in loader.get_warnings():
        logger.warning(warning)

    gamemaster = Gamemaster(ScriptedArbiter(script), max_attempts=args.max_attempts)
    try:
        winner = gamemaster.run(script.player_moves())
    except (EngineError, TransportError, ScriptValidationError) as e:
        logger.error(f"Match stopped: {e}")
        sys.exit(1)

    game = gamemaster.game
    session = game.last_session if winner is not None else game.session

    if winner is not None:
        logger.info(PhaseManager.game_over_message(winner))
    else:
        logger.info("Match ended without a result")

    if args.show_boards:
        print(session.board.pretty())
        print()
        for rank, mine, theirs in session.roster.standings():
            print(f"  {rank.value:8} {mine:2} {theirs:2}")

    if args.write_log:
        MoveWriter.save_moves_to_yaml(session.history, args.write_log, script.name, session.setup)


if __name__ == "__main__":
    main()
