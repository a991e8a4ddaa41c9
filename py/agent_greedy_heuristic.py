from klondike import Action, Klondike, Location
from config import KlondikeConfig, load_config
from rules import is_move_productive
import random
import argparse
import logging
import time
import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor
import os
from typing import List, Tuple, Dict, Optional


def is_tableau_shuffle(game: Klondike, action: Action) -> bool:
    """True for a tableau-to-tableau move that makes no progress."""
    if not (action.from_location.is_tableau and action.to_location.is_tableau):
        return False
    source = game.state.tableaus[action.from_location.tableau_index]
    target = game.state.tableaus[action.to_location.tableau_index]
    return not is_move_productive(source, action.change_index, target)


def sample_action(
    game: Klondike,
    valid_actions: list[Action],
    rng: random.Random,
    params: tuple[int, ...] = (5, 20, 10, 20, 1, 5),
) -> Action:
    if len(valid_actions) == 0:
        msg = "No valid actions"
        raise ValueError(msg)

    if len(valid_actions) == 1:
        return valid_actions[0]

    weight_map: dict[Action, int] = {}
    for action in valid_actions:
        if action.from_location == Location.STOCK:
            weight_map[action] = params[0]
        elif action.from_location == Location.WASTE and action.to_location.is_foundation:
            weight_map[action] = params[1]
        elif action.from_location == Location.WASTE and action.to_location.is_tableau:
            weight_map[action] = params[2]
        elif action.from_location.is_tableau and action.to_location.is_foundation:
            weight_map[action] = params[3]
        elif action.from_location.is_foundation and action.to_location.is_tableau:
            weight_map[action] = params[4]
        elif action.from_location.is_tableau and action.to_location.is_tableau:
            weight_map[action] = 0 if is_tableau_shuffle(game, action) else params[5]
        else:
            raise ValueError(f"Invalid action: {action}")

    total = sum(weight_map.values())
    if total == 0:
        return valid_actions[0]
    r = rng.uniform(0, total)
    upto = 0
    for item, weight in weight_map.items():
        if weight > 0 and upto + weight >= r:
            return item
        upto += weight
    return next(item for item, weight in weight_map.items() if weight > 0)


def play_game(
    seed: int,
    config: Optional[KlondikeConfig] = None,
    max_steps: int = 1000,
    verbose: bool = False,
) -> Tuple[bool, int]:
    """
    Play a single seeded game of Klondike solitaire using the greedy heuristic agent.

    Args:
        seed: Seed for both the deal and the agent's choices
        config: Engine configuration (default settings if omitted)
        max_steps: Maximum number of steps before giving up
        verbose: Whether to print game progress

    Returns:
        Tuple of (win status, number of steps taken)
    """
    game = Klondike(config)
    rng = random.Random(seed)
    game.new_game(rng=rng)
    steps = 0

    # Keep track of seen states to avoid loops
    seen_states: Dict[tuple, int] = {}

    while steps < max_steps:
        if game.is_won():
            if verbose:
                print(f"Game won in {steps} steps!")
            return True, steps

        if game.is_auto_completable():
            steps += len(game.auto_complete())
            continue

        if game.is_stuck():
            if verbose:
                print(f"No productive moves after {steps} steps. Game lost.")
            return False, steps

        valid_actions = game.get_all_legal_actions()
        if not valid_actions:
            if verbose:
                print(f"No more valid actions after {steps} steps. Game lost.")
            return False, steps

        action = sample_action(game, valid_actions, rng)
        game.step(action)
        steps += 1

        if verbose and steps % 100 == 0:
            print(f"Step {steps}, foundations filled: {game.state.foundation_count()}/52")

        # Simple loop detection
        game_state = game.snapshot()[0]
        seen_states[game_state] = seen_states.get(game_state, 0) + 1
        if seen_states[game_state] > 3:  # Allow revisiting states a few times
            if verbose:
                print(f"Loop detected after {steps} steps. Game lost.")
            return False, steps

    if verbose:
        print(f"Reached maximum steps ({max_steps}). Game lost.")
    return False, steps


def play_game_worker(args: Tuple[int, Optional[KlondikeConfig], int]) -> Tuple[bool, int]:
    """
    Worker function for parallel execution of games.

    Args:
        args: Tuple containing (seed, config, max_steps)

    Returns:
        Tuple of (win status, number of steps taken)
    """
    seed, config, max_steps = args
    return play_game(seed, config=config, max_steps=max_steps, verbose=False)


def play_multiple_games(num_games: int = 100, first_seed: int = 0, config: Optional[KlondikeConfig] = None,
                        max_steps: int = 1000, num_processes: Optional[int] = None) -> List[Tuple[bool, int]]:
    """
    Play multiple games in parallel and report statistics.

    Args:
        num_games: Number of games to play
        first_seed: Seed of the first game; game i uses first_seed + i
        config: Engine configuration shared by every game
        max_steps: Maximum steps per game
        num_processes: Number of processes to use (None = auto)

    Returns:
        One (win status, steps) tuple per game, in seed order
    """
    if num_processes is None or num_processes <= 0:
        num_cpus = os.cpu_count() or 4
        num_processes = min(num_cpus, num_games)
    else:
        num_processes = min(num_processes, num_games)

    print(f"Playing {num_games} games using {num_processes} processes...")

    start_time = time.time()
    game_args = [(first_seed + i, config, max_steps) for i in range(num_games)]
    results: List[Tuple[bool, int]] = []
    completed = 0

    with ProcessPoolExecutor(max_workers=num_processes) as executor:
        for result in executor.map(play_game_worker, game_args):
            results.append(result)

            completed += 1
            if completed % max(1, num_games // 20) == 0 or completed == num_games:
                print(f"Completed {completed}/{num_games} games...", end="\r")

    wins = sum(1 for win, _ in results if win)
    total_steps = sum(steps for _, steps in results)
    duration = time.time() - start_time

    print(f"\nResults from {num_games} games:")
    print(f"Win rate: {(wins / num_games) * 100:.2f}% ({wins}/{num_games})")
    print(f"Average steps per game: {total_steps / num_games:.2f}")
    print(f"Time taken: {duration:.2f} seconds ({duration/num_games:.2f} seconds per game)")
    return results


def main() -> None:
    """Main entry point for the CLI application."""
    # Handle process start method for multiprocessing on macOS
    if hasattr(mp, 'set_start_method'):
        try:
            mp.set_start_method('spawn')
        except RuntimeError:
            # Method already set
            pass

    parser = argparse.ArgumentParser(description='Play Klondike Solitaire with a greedy heuristic agent')
    parser.add_argument('--games', type=int, default=1,
                        help='Number of games to play (default: 1)')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed of the first game (default: 0)')
    parser.add_argument('--draw-mode', type=int, choices=(1, 3), default=None,
                        help='Cards turned per draw (default: from config, else 1)')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML file with engine settings')
    parser.add_argument('--max-steps', type=int, default=1000,
                        help='Maximum steps per game (default: 1000)')
    parser.add_argument('--verbose', action='store_true',
                        help='Print detailed game progress')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='Engine log level (default: WARNING)')
    parser.add_argument('--processes', type=int, default=0,
                        help='Number of processes to use (default: 0 = auto)')

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config) if args.config else KlondikeConfig()
    if args.draw_mode is not None:
        config.draw_mode = args.draw_mode

    if args.games == 1:
        win, steps = play_game(args.seed, config=config, max_steps=args.max_steps, verbose=args.verbose)
        print(f"Game {'won' if win else 'lost'} after {steps} steps")
    else:
        play_multiple_games(
            num_games=args.games,
            first_seed=args.seed,
            config=config,
            max_steps=args.max_steps,
            num_processes=args.processes
        )


if __name__ == "__main__":
    main()
