#!/usr/bin/env python3
"""
Replay Stratego matches from YAML match scripts.
Prints boards as the game goes and writes a summary report.
"""

import os
import sys

import yaml
from datetime import datetime
from stratego_game_engine.arbiter import ScriptedArbiter, TransportError
from stratego_game_engine.core.errors import EngineError
from stratego_game_engine.core.game_state import GamePhase
from stratego_game_engine.core.phase_manager import PhaseManager
from stratego_game_engine.gamemaster import Gamemaster, MoveWriter
from stratego_game_engine.io.yaml_moves import YAMLMatchLoader, ScriptValidationError


class GameSimulator:
    """Replays every match script listed in a game folder."""

    def __init__(self, game_folder: str, show_boards: bool = True):
        self.game_folder = game_folder
        self.show_boards = show_boards
        self.game_info = None
        self.match_results = []

    def load_game_info(self):
        """Load game_info.yaml from game folder."""
        info_path = os.path.join(self.game_folder, 'game_info.yaml')

        if not os.path.exists(info_path):
            raise FileNotFoundError(f"game_info.yaml not found in {self.game_folder}")

        with open(info_path, 'r') as f:
            self.game_info = yaml.safe_load(f) or {}

        print(f"📋 Loaded game: {self.game_info.get('name', 'Unnamed Game')}")
        print(f"   Description: {self.game_info.get('description', 'No description')}")

    def simulate_match(self, script_file: str):
        """Replay a single match script."""
        print(f"\n{'='*60}")
        print(f"📄 Processing: {script_file}")
        print(f"{'='*60}")

        loader = YAMLMatchLoader()
        result = {
            'script': script_file,
            'name': script_file,
            'turns': 0,
            'rejected': 0,
            'captures': 0,
            'warnings': [],
            'winner': None,
            'error': None,
            'standings': [],
            'board': '',
        }
        self.match_results.append(result)

        try:
            yaml_data = loader.load_from_file(os.path.join(self.game_folder, script_file))
            script = loader.parse_script(yaml_data)
        except ScriptValidationError as e:
            print(f"  ❌ Invalid match script: {e}")
            result['error'] = str(e)
            return

        result['name'] = script.name
        print(f"Match: {script.name}")

        if loader.get_corrections():
            print(f"  ✏️  Auto-corrections made: {len(loader.get_corrections())}")
            for correction in loader.get_corrections():
                print(f"     • {correction}")

        if loader.get_warnings():
            print(f"  ⚠️  Warnings: {len(loader.get_warnings())}")
            for warning in loader.get_warnings():
                print(f"     • {warning}")
            result['warnings'].extend(loader.get_warnings())

        print(f"  ✅ Parsed {len(script.exchanges)} exchanges")

        gamemaster = Gamemaster(ScriptedArbiter(script), max_attempts=self.game_info.get('max_attempts', 3))
        game = gamemaster.game

        try:
            if not gamemaster.start_game():
                print("  ⚠️  Setup was not confirmed, nothing to replay")
                return
            self._print_board("Setup confirmed", game.board)

            for move in script.player_moves():
                if game.phase != GamePhase.PLAYING:
                    break
                turn = gamemaster.play_turn(move)
                result['turns'] += 1
                if not turn.accepted:
                    result['rejected'] += 1
                    print(f"  ✖ Rejected: {move}")
                    continue

                for resolution in (turn.local, turn.opponent):
                    if resolution is None:
                        continue
                    result['captures'] += len(resolution.captured)
                    result['warnings'].extend(resolution.warnings)

                if turn.game_over:
                    result['winner'] = turn.winner
                    print(f"\n  🏆 {PhaseManager.game_over_message(turn.winner)}")
                    break
        except (EngineError, TransportError, ScriptValidationError) as e:
            print(f"  ❌ Replay stopped: {e}")
            result['error'] = str(e)

        session = game.last_session if result['winner'] is not None else game.session
        for record in session.history:
            print(f"     • P{record.player.value}: {record.line}")
        self._print_board("Final board", session.board)
        result['standings'] = session.roster.standings()
        result['board'] = session.board.pretty()

        log_folder = self.game_info.get('move_logs')
        if log_folder:
            full_log_folder = os.path.join(self.game_folder, log_folder)
            os.makedirs(full_log_folder, exist_ok=True)
            stem = os.path.splitext(os.path.basename(script_file))[0]
            log_path = os.path.join(full_log_folder, f"{stem}_moves.yaml")
            MoveWriter.save_moves_to_yaml(session.history, log_path, script.name, session.setup)
            print(f"  💾 Saved move log to {os.path.relpath(log_path, self.game_folder)}")

        print(f"  ✅ Match complete!")

    def _print_board(self, title: str, board):
        if not self.show_boards:
            return
        print(f"  {title}:")
        for line in board.pretty().splitlines():
            print(f"     {line}")

    def generate_summary_report(self):
        """Generate a summary report for all replayed matches."""
        report_path = os.path.join(self.game_folder, 'SIMULATION_REPORT.md')

        with open(report_path, 'w') as f:
            f.write(f"# Match Simulation Report\n\n")
            f.write(f"**Game:** {self.game_info.get('name', 'Unnamed')}\n")
            f.write(f"**Description:** {self.game_info.get('description', 'No description')}\n")
            f.write(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
            f.write(f"---\n\n")

            f.write(f"## Matches Simulated\n\n")
            for i, match in enumerate(self.match_results, 1):
                f.write(f"### {i}. {match['name']}\n\n")
                f.write(f"- Script: `{match['script']}`\n")
                f.write(f"- Turns played: {match['turns']}\n")
                f.write(f"- Rejected moves: {match['rejected']}\n")
                f.write(f"- Figures captured: {match['captures']}\n")
                if match['winner'] is not None:
                    f.write(f"- Result: {PhaseManager.game_over_message(match['winner'])}\n")
                else:
                    f.write(f"- Result: unfinished\n")
                if match['error']:
                    f.write(f"- Stopped: {match['error']}\n")
                for warning in match['warnings']:
                    f.write(f"- Warning: {warning}\n")
                f.write("\n")

                if match['standings']:
                    f.write(f"| Rank | Player | Opponent |\n")
                    f.write(f"|---|---|---|\n")
                    for rank, mine, theirs in match['standings']:
                        f.write(f"| {rank.value} | {mine} | {theirs} |\n")
                    f.write("\n")

                if match['board']:
                    f.write("```\n")
                    f.write(match['board'] + "\n")
                    f.write("```\n\n")

        print(f"\n📊 Summary report saved to SIMULATION_REPORT.md")

    def run(self):
        """Run the complete simulation."""
        print("\n" + "="*60)
        print("🎮 STRATEGO MATCH SIMULATOR")
        print("="*60)

        self.load_game_info()

        script_files = self.game_info.get('match_scripts', [])

        if not script_files:
            print("\n⚠️  No match scripts specified in game_info.yaml")
            return

        for script_file in script_files:
            self.simulate_match(script_file)

        self.generate_summary_report()

        print("\n" + "="*60)
        print("✅ SIMULATION COMPLETE!")
        print("="*60)
        print(f"\nResults saved in: {self.game_folder}/")
        print(f"  • Summary report: SIMULATION_REPORT.md")
        print("="*60 + "\n")


def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print("Usage: python -m stratego_game_engine.simulate_yaml <game_folder>")
        print("\nExample: python -m stratego_game_engine.simulate_yaml games/example_match")
        sys.exit(1)

    game_folder = sys.argv[1]

    if not os.path.exists(game_folder):
        print(f"Error: Game folder not found: {game_folder}")
        sys.exit(1)

    simulator = GameSimulator(game_folder)
    simulator.run()


if __name__ == "__main__":
    main()
