#!/usr/bin/env python3
"""Generate simulated scene lists.

    # The standard evaluation files (Group_01_Position_Test.txt, ...)
    python scripts/generate_scenes.py --suite --output Tests

    # 20 random scenes in one file
    python scripts/generate_scenes.py --kind random --count 20 --output Tests/random.txt
"""

import argparse
import logging
import random

from intentnet.io import save_scene_list
from intentnet.simulation import SceneSimulator


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Generate simulated scene lists")
    parser.add_argument("--suite", action="store_true",
                        help="Write the full set of evaluation files into --output (a directory)")
    parser.add_argument("--kind", default="random",
                        choices=["fixed", "positions", "mixed", "random", "complete"],
                        help="Scene kind when not writing the suite")
    parser.add_argument("--count", type=int, default=20,
                        help="Number of scenes when not writing the suite")
    parser.add_argument("--output", default="Tests",
                        help="Output directory (--suite) or file")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")

    args = parser.parse_args()

    simulator = SceneSimulator(rng=random.Random(args.seed))
    if args.suite:
        written = simulator.generate_test_suite(args.output)
        for stem, path in written.items():
            print(f"  {stem:<24s} {path}")
    else:
        scenes = simulator.generate(args.kind, args.count)
        path = save_scene_list(args.output, scenes)
        print(f"Wrote {len(scenes)} {args.kind} scenes to {path}")


if __name__ == "__main__":
    main()
