#!/usr/bin/env python3
"""
Make Overlay Script.

Generate a calculator keyboard overlay sheet as PDF.

Usage:
    keycap-overlay --cut                 # voyager-overlay-cut.pdf
    keycap-overlay --print --sm          # dm1xl-overlay-print.pdf
    keycap-overlay --all -o proof.pdf
    python -m keycap_overlay.scripts.make_overlay --cut --config my.yaml

Modes (exactly one):
    cut    overlay outlines and key cut-outs
    print  registration marks and legends
    all    registration, legends, and cut lines

Models (at most one, default from the profile file):
    one flag per overlay profile, e.g. --hp, --sm
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from keycap_overlay.configs.loader import ConfigError, OverlayConfig, load_config
from keycap_overlay.geometry.tiling import LayoutInfeasibleError
from keycap_overlay.intents import (
    ConfigurationConflictError,
    output_filename,
    resolve_intents,
)
from keycap_overlay.render.pdf import PdfRenderer, RenderError
from keycap_overlay.sheet import compose_sheet
from keycap_overlay.utils.logging_config import (
    install_excepthook,
    pop_context,
    push_context,
    setup_logging,
)

logger = logging.getLogger(__name__)


def build_parser(config: OverlayConfig) -> argparse.ArgumentParser:
    """Argument parser with one flag per overlay model in *config*.

    Exclusivity is checked by ``resolve_intents`` rather than argparse so
    that conflicts are reported with both option names.
    """
    parser = argparse.ArgumentParser(
        description="Generate calculator keycap overlay PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Overlay models: {', '.join(config.models.keys())}",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Profile file (YAML); default is the shipped profiles.yaml",
    )

    modes = parser.add_argument_group("mode (exactly one)")
    modes.add_argument("--cut", "-c", action="store_true", help="cut marks")
    modes.add_argument(
        "--print", "-p", action="store_true",
        help="print (registration and legends)",
    )
    modes.add_argument(
        "--all", "-a", action="store_true",
        help="all (registration, legends, and cut marks)",
    )

    models = parser.add_argument_group("model (at most one)")
    for name, model in config.models.items():
        models.add_argument(
            f"--{name}",
            dest=f"model_{name}",
            action="store_true",
            help=model.description or name,
        )

    parser.add_argument(
        "--output", "-o", type=str,
        help="Output PDF file (default: {model}-overlay-{mode}.pdf)",
    )
    parser.add_argument(
        "--registration", type=str,
        help=f"Registration profile (default: {config.default_registration})",
    )
    parser.add_argument(
        "--log-level", type=str,
        help=f"Logging level (default: {config.logging.log_level})",
    )
    return parser


def _pre_parse_config(argv: list[str]) -> str | None:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", type=str)
    known, _ = pre.parse_known_args(argv)
    return known.config


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    try:
        config = load_config(_pre_parse_config(argv))
    except (ConfigError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    args = build_parser(config).parse_args(argv)

    log_cfg = config.logging
    try:
        setup_logging(
            args.log_level or log_cfg.log_level,
            log_cfg.log_file,
            json=log_cfg.json,
            color=log_cfg.color,
            quiet_libs=["reportlab"],
            context={"app": "keycap-overlay"},
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    install_excepthook()

    options = {
        "cut": args.cut,
        "print": args.print,
        "all": args.all,
        **{name: getattr(args, f"model_{name}") for name in config.models},
    }

    try:
        intents, model_name = resolve_intents(
            options, config.models.keys(), config.default_model,
        )
        model = config.get_model(model_name)
        push_context(model=model_name, mode=intents.mode)
        logger.info("Generating %s sheet for %s", intents.mode, model_name)

        reg = config.get_registration(args.registration)
        sheet = compose_sheet(config, model, intents, reg)

        out = Path(args.output or output_filename(model.file_prefix, intents.mode))
        PdfRenderer(sheet, title=f"{model.description} overlay ({intents.mode})").write(out)
    except (
        ConfigurationConflictError,
        ConfigError,
        LayoutInfeasibleError,
        RenderError,
    ) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        pop_context(keys=["model", "mode"])

    print(f"Wrote {out} ({len(sheet.placements)} overlays)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
