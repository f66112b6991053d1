# main.py
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from converters import (
    to_character_seeds,
    to_legacy_parse_result,
    to_lore_records,
    to_storyboard_issue,
    to_timeline_events,
)
from core.exceptions import ScriptCanonError
from core.logging_config import setup_logging
from core.parsers import AIScriptParser, parse_script
from models.script_models import ProjectType, UnifiedParseResult

logger = structlog.get_logger(__name__)

FORMAT_CHOICES = [member.value for member in ProjectType] + ["auto"]
OUTPUT_CHOICES = ["canonical", "storyboard", "characters", "lore", "timeline", "legacy"]


def render_output(result: UnifiedParseResult, output: str, title: str | None = None) -> Any:
    """Convert a parse result into the JSON-ready shape named by `output`."""
    if output == "canonical":
        return result.to_json_dict()
    if output == "storyboard":
        return to_storyboard_issue(result, title).model_dump(mode="json", by_alias=True)
    if output == "characters":
        return [seed.model_dump(mode="json", by_alias=True) for seed in to_character_seeds(result)]
    if output == "lore":
        return [record.model_dump(mode="json", by_alias=True) for record in to_lore_records(result)]
    if output == "timeline":
        return [event.model_dump(mode="json") for event in to_timeline_events(result)]
    if output == "legacy":
        return to_legacy_parse_result(result).model_dump(mode="json", by_alias=True)
    raise ValueError(f"Unknown output shape: {output}")


async def run(args: argparse.Namespace) -> UnifiedParseResult:
    text = Path(args.script).read_text(encoding="utf-8")
    project_type = None if args.format == "auto" else args.format

    if not args.ai:
        return await parse_script(text, project_type)

    async with AIScriptParser(model=args.model) as ai_parser:
        return await parse_script(text, project_type, ai_parser=ai_parser, enrich=not args.no_enrich)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse a comic script into canonical JSON")
    parser.add_argument("script", type=str, help="Path to the script text file")
    parser.add_argument("--format", "-f", choices=FORMAT_CHOICES, default="auto", help="Script format (default: auto)")
    parser.add_argument("--output", "-o", choices=OUTPUT_CHOICES, default="canonical", help="Output shape")
    parser.add_argument("--title", "-t", type=str, default=None, help="Issue title for storyboard output")
    parser.add_argument("--ai", action="store_true", help="Use the AI parser (requires OPENAI_API_KEY)")
    parser.add_argument("--model", type=str, default=None, help="Override the AI parser model")
    parser.add_argument("--no-enrich", action="store_true", help="Skip deterministic enrichment of AI results")
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_arg_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Script parser shutting down due to KeyboardInterrupt...")
        return 130
    except (OSError, ScriptCanonError) as e:
        logger.error(f"Script parse failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(render_output(result, args.output, args.title), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
