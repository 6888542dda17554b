"""CLI argument parsing and main entry point."""

import argparse
import asyncio
import sys
from pathlib import Path

import den_stitcher.config as sd_config
import den_stitcher.main as sd_main
from den_stitcher.constants import PREF_LAYOUT_MODE
from den_stitcher.errors import StitchError
from den_stitcher.logging_utils import logger, set_verbose
from den_stitcher.preferences import PreferenceStore
from den_stitcher.runtime import resolve_project_version
from den_stitcher.type_defs import LAYOUT_MODES, SOURCE_SCOPES


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        description="Stitch every bear in your den into one grid image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            f"Examples:\n"
            f"python {Path(__file__).name} --user-data-dir ~/.den-profile "
            f"--headful\n"
            f"python {Path(__file__).name} --scope single --layout square\n\n"
            "Note:\n"
            "  The den needs a signed-in session. Use --user-data-dir with "
            "--headful once to sign in, later runs reuse the profile."
        ),
    )
    p.add_argument(
        "--version", action="version",
        version=f"%(prog)s {resolve_project_version()}")

    harvest = p.add_argument_group("harvest")
    harvest.add_argument(
        "--scope", choices=list(SOURCE_SCOPES), default="dual",
        help="Stitch both den tabs (dual) or just the start page (single)")
    harvest.add_argument(
        "--layout", choices=list(LAYOUT_MODES), default=None,
        help=(
            "tight keeps empty cells to a minimum, square always makes an "
            "NxN grid. Remembered for later runs."
        ))
    harvest.add_argument(
        "--timeout", type=float, default=None,
        help="Seconds to wait for each page to finish loading")

    output = p.add_argument_group("output")
    output.add_argument(
        "--output", type=str, default=None, help="Output directory")
    output.add_argument(
        "--preferences", type=str, default=None,
        help="Path to the preferences file")

    browser = p.add_argument_group("browser")
    browser.add_argument(
        "--url", type=str, default=None,
        help="Page to open before stitching")
    browser.add_argument(
        "--user-data-dir", type=str, default=None,
        help="Persistent browser profile directory")
    browser.add_argument(
        "--headful", action="store_true",
        help="Show the browser window")

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str,
        help="Path to config.toml file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate config file and exit without stitching")
    cfg.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging")

    return p


def resolve_layout_mode(
    requested: str | None,
    store: PreferenceStore,
    default: str,
) -> str:
    """
    Return the layout mode for this run.

    An explicit choice is persisted for next time; otherwise the stored
    preference is used, falling back to default.
    """
    if requested is not None:
        store.persist(PREF_LAYOUT_MODE, requested)
        return requested
    stored = store.read(PREF_LAYOUT_MODE, default)
    if stored not in LAYOUT_MODES:
        logger.warning("Ignoring unknown stored layout %r", stored)
        return default
    return stored


def log_parameters(
    cfg: sd_config.StitcherConfig,
    args: argparse.Namespace,
    mode: str,
) -> None:
    """Log the effective run parameters."""
    if getattr(args, "config", None):
        logger.info("Loaded config from: %s", args.config)
    logger.info("Scope: %s", args.scope)
    logger.info("Layout: %s", mode)
    logger.info("Site: %s%s", cfg.site.origin, cfg.site.den_path)
    logger.info("Output Directory: %s", cfg.output.output)
    logger.info("Navigation Timeout (s): %.1f",
                cfg.harvest.navigation_timeout_s)
    logger.info("Browser: %s",
                "Headless" if cfg.browser.headless else "Visible")


def run_from_args(args: argparse.Namespace) -> int:
    """Run a stitch from command-line arguments and return an exit code."""
    set_verbose(args.verbose)

    base_cfg: sd_config.StitcherConfig | None = None
    if args.config:
        base_cfg = sd_config.ConfigLoader.load(args.config)
        if args.validate_config_only:
            logger.info("Config %s validated successfully.", args.config)
            return 0

    cfg = sd_config.build_config_from_cli(vars(args), base_config=base_cfg)

    store = PreferenceStore(cfg.output.preferences)
    mode = resolve_layout_mode(args.layout, store, cfg.layout.mode)
    log_parameters(cfg, args, mode)

    try:
        asyncio.run(sd_main.stitch(cfg, scope=args.scope, mode=mode))
    except StitchError as exc:
        logger.error("Stitch failed: %s", exc)
        return 1
    return 0


def main() -> None:
    """Run the command-line interface."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args()
    if args.validate_config_only and not args.config:
        arg_parser.error("--validate-config-only requires --config")

    sys.exit(run_from_args(args))


if __name__ == "__main__":  # pragma: no cover
    main()
