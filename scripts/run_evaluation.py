#!/usr/bin/env python3
"""Batch evaluation with a simulated user.

Runs one session per scene in a range of a scene-list file, answering
every query as a person who wants ``--action`` on ``--object`` would,
and appends the question counts to a results file.

    python scripts/run_evaluation.py Tests/Group_Learning_Test.txt \\
        --object Box1 --action Grasp --start 40 --end 50 --policy count \\
        --results Results/Group_Learning_Counts_Results.csv
"""

import argparse
import logging

from intentnet.brain import IntentionEngine
from intentnet.core import RankingPolicy
from intentnet.io import load_scene_list
from intentnet.simulation import SimulatedUser, run_evaluation
from intentnet.utils.config import load_config


logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Evaluate intention queries with a simulated user")
    parser.add_argument("scenes", help="Scene-list file")
    parser.add_argument("--object", default="Box1",
                        help="Desired object instance")
    parser.add_argument("--action", default="Grasp",
                        help="Desired action")
    parser.add_argument("--start", type=int, default=0,
                        help="First scene (inclusive)")
    parser.add_argument("--end", type=int, default=None,
                        help="Last scene (exclusive)")
    parser.add_argument("--policy", choices=[p.value for p in RankingPolicy], default=None,
                        help="Ranking policy (overrides config)")
    parser.add_argument("--no-learning", action="store_true",
                        help="Do not update templates on resolved sessions")
    parser.add_argument("--batch-learning", action="store_true",
                        help="Blend per-scene template averages after each session")
    parser.add_argument("--config", default=None,
                        help="Path to YAML config (default: config/default.yaml)")
    parser.add_argument("--store", default="TestObjectActionMap.map",
                        help="Compatibility store file")
    parser.add_argument("--results", default=None,
                        help="Append question counts to this file")
    parser.add_argument("--save-templates", action="store_true",
                        help="Write the store back after the run")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for tie breaking")

    args = parser.parse_args()

    overrides = {"store.path": args.store}
    if args.seed is not None:
        overrides["ranking.random_seed"] = args.seed
    config = load_config(args.config, overrides=overrides)

    scenes = load_scene_list(args.scenes)[args.start:args.end]
    engine = IntentionEngine.from_config(config)
    user = SimulatedUser(object_name=args.object, action=args.action)

    report = run_evaluation(
        engine, scenes, user,
        policy=args.policy,
        learn=not args.no_learning,
        batch_learning=args.batch_learning,
        label=user.describe(),
    )

    print(report.summary())
    print(" ".join(str(n) for n in report.interaction_counts))
    if args.results:
        report.append_to(args.results)
        logger.info(f"Appended results to {args.results}")
    if args.save_templates:
        engine.write_templates()


if __name__ == "__main__":
    main()
