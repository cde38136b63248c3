"""
命令行：为场景文档构建执行计划。
Usage:
  python -m planner.cli --scene scenes/the_plan.json
  python -m planner.cli --scene scenes/the_plan.json --output output/plan.json
  python -m planner.cli --scene scenes/the_plan.json --assets output/assets.json --payload
  python -m planner.cli --scene scenes/the_plan.json --transcript scenes/the_plan_transcript.json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from config.logging_config import setup_logging
from config.settings import get_settings
from models.reference import ShotIndex
from planner.assets import score_scene_assets
from planner.dialogue import split_dialogue
from planner.execution import build_execution_plan, build_webhook_payload
from planner.loader import load_scene, load_shot_index, load_transcript, save_document

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build an execution plan (and optional asset manifest) for a scene document."
    )
    parser.add_argument("--scene", "-s", type=Path, required=True, help="Scene document (.json/.yaml).")
    parser.add_argument(
        "--index",
        type=Path,
        default=None,
        help="Shot index JSON (default: settings.index_path, skipped if missing).",
    )
    parser.add_argument("--output", "-o", type=Path, default=None, help="Write the plan to this path.")
    parser.add_argument("--assets", type=Path, default=None, help="Write the asset manifest to this path.")
    parser.add_argument(
        "--payload",
        action="store_true",
        help="Print the automation webhook payload instead of the plan.",
    )
    parser.add_argument(
        "--transcript",
        type=Path,
        default=None,
        help="Transcript JSON; its words are split across shots by frame before planning.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: settings.log_level).")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_file)

    try:
        scene = load_scene(args.scene)
        if args.transcript:
            scene = split_dialogue(scene, load_transcript(args.transcript))
        index_path = args.index or settings.index_path
        shot_index = (
            load_shot_index(index_path)
            if args.index or settings.index_path.exists()
            else ShotIndex()
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    plan = build_execution_plan(scene, shot_index, settings)
    if args.output:
        logger.info("执行计划已保存: %s", save_document(plan, args.output))
    if args.assets:
        logger.info("素材清单已保存: %s", save_document(score_scene_assets(scene, settings), args.assets))

    doc = build_webhook_payload(plan) if args.payload else plan.model_dump(mode="json")
    json.dump(doc, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
