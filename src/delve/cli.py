from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import GenerationSettings
from .errors import ConfigurationError
from .generator import generate_dungeon
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="delve", description="Generate a deterministic BSP dungeon layout.")
    p.add_argument("--config", metavar="FILE", help="YAML settings file")
    p.add_argument("--width", type=int)
    p.add_argument("--height", type=int)
    p.add_argument("--min-partition", dest="min_partition_size", type=int)
    p.add_argument("--max-room", dest="max_room_size", type=int)
    p.add_argument("--seed", type=int)
    p.add_argument("--random-seed", dest="use_random_seed", action="store_true", default=None,
                   help="Ignore --seed and draw a seed from the clock")

    loot = p.add_argument_group("loot")
    loot.add_argument("--loot-base", dest="loot_base_per_room", type=float)
    loot.add_argument("--loot-small-multiplier", dest="loot_small_room_multiplier", type=float)
    loot.add_argument("--loot-max", dest="loot_max_per_room", type=int)
    loot.add_argument("--loot-padding", dest="loot_edge_padding", type=int)
    loot.add_argument("--allow-loot-overlap", dest="prevent_loot_overlap", action="store_false", default=None)

    sg = p.add_argument_group("spawn / goal")
    sg.add_argument("--spawn-padding", dest="spawn_goal_edge_padding", type=int)
    sg.add_argument("--random-goal", dest="place_goal_far_from_spawn", action="store_false", default=None,
                    help="Pick any other room for the goal instead of the farthest one")
    sg.add_argument("--allow-spawn-on-loot", dest="prevent_spawn_goal_on_loot", action="store_false", default=None)

    p.add_argument("--ascii", action="store_true", help="Print the map instead of JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    overrides: Dict[str, Any] = {
        name: getattr(args, name)
        for name in GenerationSettings.field_names()
        if getattr(args, name, None) is not None
    }
    return GenerationSettings.from_sources(config_path=args.config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else None)

    try:
        settings = build_settings(args)
        layout = generate_dungeon(settings)
    except ConfigurationError as exc:
        print(f"delve: invalid configuration: {exc}", file=sys.stderr)
        return 2

    if args.ascii:
        print("\n".join(layout.render()))
    else:
        # JSON so runs can be diffed
        print(json.dumps(layout.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
