import argparse
import dataclasses
import json
import logging
import os
import sys
import uuid as _uuid
from typing import List, Optional

from config.settings import get_settings
from pipelines.process_founders import process_founders
from services.output_writer import write_founder_profiles
from services.progress_checkpoint import ProgressCheckpoint
from services.reporting import print_summary
from utils.logging_setup import init_logging

logger = logging.getLogger("cli")


def cmd_run(args) -> int:
    settings = get_settings()
    overrides = {}
    if args.records_per_run is not None:
        overrides["records_per_run"] = args.records_per_run
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    settings.require_credentials()

    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex

    ctx = process_founders(settings, input_path=args.input or settings.input_csv)
    if ctx.meta.get("exhausted"):
        print("All records have been processed. Progress reset; the next run starts from the beginning.")
    elif ctx.meta.get("interrupted"):
        path = ctx.meta.get("partial_output_path")
        print(f"Interrupted; resume point saved at record {ctx.meta.get('next_index', 0) + 1}")
        if path:
            print(f"Partial results saved to {path}")
    else:
        print_summary(ctx.meta.get("output") or {}, ctx.meta.get("output_path"))
    return 0


def cmd_filter(args) -> int:
    json_path, txt_path = write_founder_profiles(args.input, args.output_dir)
    print(f"Results have been saved to {json_path} and {txt_path}")
    return 0


def cmd_progress(args) -> int:
    state = ProgressCheckpoint(get_settings().progress_file).load()
    print(json.dumps(state.model_dump(by_alias=True), indent=2))
    return 0


def cmd_reset_progress(args) -> int:
    ProgressCheckpoint(get_settings().progress_file).save(0)
    print("Progress reset to 0")
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Founder DM finder: locate founders' X profiles, check DMs, score with an LLM")
    parser.add_argument("--log-level", "-l", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=settings.log_level.upper(), help="Set logging level (default: from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Process the next window of founders from the input CSV")
    p_run.add_argument("--input", "-i", type=str, default=None, help=f"Founders CSV (default: {settings.input_csv})")
    p_run.add_argument("--records-per-run", type=int, default=None, help=f"Records per run (default: {settings.records_per_run})")
    p_run.add_argument("--batch-size", type=int, default=None, help=f"Records per batch (default: {settings.batch_size})")
    p_run.set_defaults(func=cmd_run)

    p_flt = sub.add_parser("filter", help="Derive founder_profiles.json/.txt from a run output file")
    p_flt.add_argument("--input", required=True, help="Path to a batch<N>_output.json file")
    p_flt.add_argument("--output-dir", default=".", help="Directory for founder_profiles.* (default: current directory)")
    p_flt.set_defaults(func=cmd_filter)

    p_prog = sub.add_parser("progress", help="Show the saved resume point")
    p_prog.set_defaults(func=cmd_progress)

    p_reset = sub.add_parser("reset-progress", help="Restart from the first record on the next run")
    p_reset.set_defaults(func=cmd_reset_progress)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(args.log_level)
    try:
        return args.func(args)
    except RuntimeError as e:
        logger.error(f"Error: {e}", extra={"status": "fatal"})
        return 1
    except Exception:
        logger.exception("Fatal error", extra={"status": "fatal"})
        return 1


if __name__ == "__main__":
    sys.exit(main())
