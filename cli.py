#!/usr/bin/env python3
"""
Spire Speller - Command Line Interface

Inspect the generators and play a text run from the terminal.

Usage:
    python cli.py map --seed 42
    python cli.py card --word hypothesis --type ATTACK
    python cli.py intents --enemy cultist --turns 6
    python cli.py deck --pack scholar
    python cli.py deck --file words.csv --json
    python cli.py import words.json
    python cli.py profiles create --name Ada
    python cli.py play --pack scholar --seed 42
"""

import argparse
import json
import logging
import os
import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.speller import (
    CardType, GamePhase, GameRunner, SpellerError, Vocabulary,
    configure_logging, generate_map, get_pack, load_settings, map_to_string,
    parse_vocabulary, PRESET_PACKS, DEFAULT_PACK_ID, create_card,
)
from packages.speller.audio import RecordingAudio
from packages.speller.content.enemies import POOLS, TRAINING_DUMMY, intent_cycle
from packages.speller.generation.deck import generate_session_deck
from packages.speller.persistence import JsonFileStore, ProfileStore

logger = logging.getLogger("speller.cli")


# =============================================================================
# HELPERS
# =============================================================================

def load_words(pack_id: Optional[str], path: Optional[str]) -> List[Vocabulary]:
    """Word list from a file, else from a built-in pack."""
    if path:
        content = Path(path).read_text(encoding="utf-8")
        return parse_vocabulary(content, filename=path)
    pack = get_pack(pack_id or DEFAULT_PACK_ID)
    if pack is None:
        raise SpellerError(f"Unknown pack: {pack_id}")
    return pack.vocab_list()


def open_profiles() -> ProfileStore:
    settings = load_settings()
    return ProfileStore(JsonFileStore(settings.profiles_dir))


def format_card(card) -> str:
    tags = []
    if card.debuff:
        tags.append(card.debuff.value)
    if card.is_review:
        tags.append("review")
    suffix = f" [{', '.join(tags)}]" if tags else ""
    return f"{card.name:<22} {card.type.value:<8} cost {card.energy_cost}  {card.description}{suffix}"


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_map(args) -> int:
    """Generate and display a map."""
    nodes = generate_map(args.seed)
    if args.json:
        print(json.dumps([n.to_dict() for n in nodes], indent=2))
        return 0

    print(f"Seed: {args.seed}")
    print(map_to_string(nodes))

    counts = {}
    for node in nodes:
        counts[node.type.name] = counts.get(node.type.name, 0) + 1
    print("\nRoom Distribution:")
    for room_type, count in sorted(counts.items()):
        print(f"  {room_type}: {count}")
    return 0


def cmd_card(args) -> int:
    """Derive card stats for a word."""
    vocab = replace(Vocabulary.create(args.word), proficiency=max(0, min(5, args.proficiency)))
    card = create_card(CardType[args.type.upper()], vocab)
    if args.json:
        print(json.dumps(card.to_dict(), indent=2))
    else:
        print(f"{args.word} (proficiency {vocab.proficiency})")
        print(f"  {format_card(card)}")
        print(f"  value {card.value}  heal {card.heal_value}  draw {card.draw_effect}  "
              f"retain {card.retain}  exhaust {card.is_exhaust}  tag {card.visual_tag.value}")
    return 0


def cmd_intents(args) -> int:
    """Print an enemy's intent cycle."""
    known = {t.id for pool in POOLS.values() for t in pool} | {TRAINING_DUMMY.id}
    if args.enemy not in known:
        print(f"Unknown enemy: {args.enemy}. Known: {', '.join(sorted(known))}")
        return 1
    for turn, intent in enumerate(intent_cycle(args.enemy, args.turns), start=1):
        print(f"  Turn {turn}: {intent}")
    return 0


def cmd_deck(args) -> int:
    """Assemble a session deck."""
    words = load_words(args.pack, args.file)
    rng = random.Random(args.seed) if args.seed is not None else None
    deck = generate_session_deck(words, rng=rng)
    if args.json:
        print(json.dumps([c.to_dict() for c in deck], indent=2))
        return 0
    print(f"Deck ({len(deck)} cards):")
    for i, card in enumerate(deck):
        print(f"  {i:>2}: {format_card(card)}")
    return 0


def cmd_import(args) -> int:
    """Validate a vocabulary file."""
    words = load_words(None, args.path)
    print(f"{len(words)} words parsed from {args.path}")
    for vocab in words:
        print(f"  {vocab.word:<20} {vocab.difficulty:<7} {vocab.meaning}")
    return 0


def cmd_profiles(args) -> int:
    """List, create or delete profiles."""
    profiles = open_profiles()
    if args.action == "create":
        profile = profiles.create_profile(args.name or "")
        print(f"Created {profile.name} ({profile.id})")
    elif args.action == "delete":
        if not args.id:
            print("--id is required")
            return 1
        if not profiles.delete_profile(args.id):
            print(f"No profile {args.id}")
            return 1
        print(f"Deleted {args.id}")
    else:
        for profile in profiles.list_profiles():
            print(f"  {profile.id}  {profile.name:<16} shards {profile.currency:<5} "
                  f"acts {profile.acts_cleared} runs {profile.stats.runs_started} wins {profile.stats.wins}")
            for slot, info in profiles.list_runs(profile.id).items():
                print(f"      slot {slot}: {info['saveName']}")
    return 0


# =============================================================================
# INTERACTIVE PLAY
# =============================================================================

def print_state(runner: GameRunner) -> None:
    rs = runner.run_state
    player = rs.player
    print(f"\n[{rs.phase.value}] Act {rs.act}  HP {player.hp}/{player.max_hp}  "
          f"Gold {player.gold}  Relics {', '.join(player.relics) or '-'}")

    if runner.combat is not None and rs.phase == GamePhase.COMBAT:
        state = runner.combat.state
        enemy = state.enemy
        print(f"  {enemy.name}: {enemy.hp}/{enemy.max_hp} HP, block {enemy.block}, intent {enemy.intent}")
        print(f"  Energy {player.energy}  Block {player.block}  Draw {len(state.draw_pile)}  "
              f"Discard {len(state.discard_pile)}")
        active = runner.combat.active_card
        if active is not None:
            hidden = "???" if active.debuff and active.debuff.value == "BLIND" else active.vocab.meaning
            print(f"  Spell: {hidden} {active.vocab.phonetic}")
        for i, card in enumerate(state.hand):
            print(f"   {i}: {format_card(card)}")
    elif rs.phase == GamePhase.LAST_STAND:
        word = runner.combat.current_last_stand_word
        print(f"  LAST STAND - spell: {word.meaning} {word.phonetic}")
    elif rs.phase == GamePhase.REWARD:
        for i, card in enumerate(runner.reward_options):
            print(f"   {i}: {format_card(card)}")
    elif rs.phase == GamePhase.SHOP and rs.shop_state:
        for item in rs.shop_state.items:
            status = "SOLD" if item.is_sold else f"{item.price}g"
            print(f"   {item.id}: {item.name} ({status})")
    elif rs.phase == GamePhase.EVENT and runner.current_event:
        event = runner.current_event
        print(f"  {event.title}: {event.description}")
        for choice in event.choices:
            print(f"   {choice.id}: {choice.text}")
    elif rs.phase == GamePhase.MAP:
        print(f"  Available: {', '.join(runner.available_nodes())}")

    if runner.pending_removal:
        print("  Choose a card to remove:")
        for card in rs.deck:
            print(f"   {card.instance_id}: {card.name}")


def parse_command(runner: GameRunner, line: str) -> Optional[dict]:
    """Turn a typed line into an action dict."""
    parts = line.split()
    cmd, rest = parts[0], parts[1:]
    phase = runner.phase

    if cmd in ("go", "move") and rest:
        return {"type": "select_node", "node_id": rest[0]}
    if cmd == "play" and rest and runner.combat is not None:
        hand = runner.combat.state.hand
        idx = int(rest[0])
        if 0 <= idx < len(hand):
            return {"type": "begin_card", "card": hand[idx].instance_id}
        return None
    if cmd == "end":
        return {"type": "end_turn"}
    if cmd == "cancel":
        return {"type": "cancel"}
    if cmd == "pick":
        return {"type": "reward", "index": int(rest[0]) if rest else None}
    if cmd in ("sleep", "smith"):
        return {"type": "rest", "option": cmd}
    if cmd == "remove" and rest:
        return {"type": "remove_card", "card": rest[0]}
    if cmd == "buy" and rest:
        return {"type": "buy", "item": rest[0]}
    if cmd == "leave":
        return {"type": "leave_shop"}
    if cmd == "choose" and rest:
        return {"type": "event", "choice": rest[0]}
    if cmd == "next":
        return {"type": "next_act"}
    if cmd == "save":
        return {"type": "save", "slot": int(rest[0]) if rest else 1}
    if cmd == "tutorial":
        return {"type": "tutorial"}
    if phase == GamePhase.LAST_STAND:
        return {"type": "last_stand", "text": line}
    if runner.combat is not None and runner.combat.active_card is not None:
        return {"type": "spell", "text": line}
    return None


def cmd_play(args) -> int:
    """Interactive text run."""
    profiles = open_profiles() if args.profile else None
    audio = RecordingAudio() if args.verbose else None
    rng = random.Random(args.seed) if args.seed is not None else None

    if profiles and args.slot is not None:
        runner = GameRunner.load(profiles, args.profile, args.slot, audio=audio, rng=rng)
        if runner is None:
            print(f"Slot {args.slot} is empty")
            return 1
    else:
        words = load_words(args.pack, args.file)
        runner = GameRunner(words, pack_id=None if args.file else (args.pack or DEFAULT_PACK_ID),
                            seed=args.seed, profiles=profiles, profile_id=args.profile,
                            audio=audio, rng=rng)

    print("=" * 60)
    print("Spire Speller")
    print("=" * 60)
    print("Commands: go <node>, play <i>, <word>, end, cancel, pick [i], sleep, smith,")
    print("          remove <card>, buy <item>, leave, choose <id>, next, save [slot], map, quit")

    while not runner.game_over:
        print_state(runner)
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting...")
            return 0
        if not line:
            continue
        if line in ("quit", "exit", "q"):
            break
        if line == "map":
            print(map_to_string(runner.run_state.game_map))
            continue

        try:
            action = parse_command(runner, line)
        except ValueError:
            action = None
        if action is None:
            print("Unknown command")
            continue

        response = runner.take_action(action)
        if not response["success"]:
            print(response.get("error", "Not possible right now"))
        if "event" in response:
            print(f"  {response['event']['message']}")
        if audio is not None:
            for name, arg in audio.calls:
                print(f"  ~ {name} {arg or ''}")
            audio.calls.clear()

    if runner.phase == GamePhase.VICTORY:
        print("\nThe Spire is conquered!")
    elif runner.phase == GamePhase.GAME_OVER:
        print("\nGame over.")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def main():
    settings = load_settings()
    configure_logging(settings)

    parser = argparse.ArgumentParser(
        description="Spire Speller - generators and a text run",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s map --seed 42
  %(prog)s card --word serendipity --type ATTACK
  %(prog)s intents --enemy guardian --turns 8
  %(prog)s deck --pack merchant
  %(prog)s play --pack scholar --profile abc123def
        """
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Map command
    map_parser = subparsers.add_parser("map", help="Generate and display a map")
    map_parser.add_argument("--seed", "-s", type=int, required=True, help="Map seed")
    map_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Card command
    card_parser = subparsers.add_parser("card", help="Derive a card for a word")
    card_parser.add_argument("--word", "-w", required=True, help="The word")
    card_parser.add_argument("--type", "-t", default="ATTACK",
                             choices=[t.name for t in CardType], help="Card type")
    card_parser.add_argument("--proficiency", "-p", type=int, default=0, help="Proficiency 0-5")
    card_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Intents command
    intents_parser = subparsers.add_parser("intents", help="Print an enemy's intent cycle")
    intents_parser.add_argument("--enemy", "-e", required=True, help="Enemy id")
    intents_parser.add_argument("--turns", "-n", type=int, default=6, help="Turns to show")

    # Deck command
    deck_parser = subparsers.add_parser("deck", help="Assemble a session deck")
    deck_parser.add_argument("--pack", choices=[p.id for p in PRESET_PACKS], help="Built-in pack")
    deck_parser.add_argument("--file", "-f", help="Vocabulary file (JSON or CSV)")
    deck_parser.add_argument("--seed", "-s", type=int, help="Shuffle seed")
    deck_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Import command
    import_parser = subparsers.add_parser("import", help="Validate a vocabulary file")
    import_parser.add_argument("path", help="Vocabulary file (JSON or CSV)")

    # Profiles command
    profiles_parser = subparsers.add_parser("profiles", help="Manage profiles")
    profiles_parser.add_argument("action", nargs="?", default="list", choices=["list", "create", "delete"])
    profiles_parser.add_argument("--name", help="Name for a new profile")
    profiles_parser.add_argument("--id", help="Profile id to delete")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a text run")
    play_parser.add_argument("--pack", choices=[p.id for p in PRESET_PACKS], help="Built-in pack")
    play_parser.add_argument("--file", "-f", help="Vocabulary file (JSON or CSV)")
    play_parser.add_argument("--seed", "-s", type=int, help="Map seed")
    play_parser.add_argument("--profile", help="Profile id (enables saves and unlocks)")
    play_parser.add_argument("--slot", type=int, help="Resume from this save slot")
    play_parser.add_argument("--verbose", "-v", action="store_true", help="Print audio cues")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "map": cmd_map,
        "card": cmd_card,
        "intents": cmd_intents,
        "deck": cmd_deck,
        "import": cmd_import,
        "profiles": cmd_profiles,
        "play": cmd_play,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args)
    except SpellerError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
