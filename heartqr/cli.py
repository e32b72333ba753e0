"""heartqr CLI: render, verify and budget-check heart-styled QR codes."""

import argparse
import sys
from pathlib import Path

from PIL import Image

from heartqr import DEFAULT_SIZE, MAX_BUDGET_USE, SIZE_PRESETS, __version__
from heartqr.errors import HeartQRError
from heartqr.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def cmd_render(args) -> int:
    """Render a heart QR code to PNG."""
    from heartqr.compositor import render_heart_qr
    from heartqr.config import StyleConfig
    from heartqr.urls import export_name, validate_url

    url = validate_url(args.url)
    style = StyleConfig.from_names(
        pattern=args.pattern,
        module_style=args.module_style,
        color_mode=args.mode,
        timing_protected=args.protect_timing,
        noise_seed=args.seed,
    )
    image, result = render_heart_qr(
        url,
        args.size,
        foreground=args.color,
        accent=args.heart_color,
        style=style,
        pattern_color=args.pattern_color,
        strict_budget=args.strict_budget,
        max_budget_use=args.max_budget_use,
    )

    output = Path(args.output) if args.output else Path(export_name(url))
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output, "PNG")
    print(f"Rendered: {output} ({result.final_size}px / modules={result.module_count} "
          f"/ module={result.module_size}px / level=H / bg=white)")
    if result.dropped_modules:
        print(f"  Heart mask dropped {result.dropped_modules} modules "
              f"({result.budget_used_pct:.1f}% of error budget)")

    if args.verify:
        from heartqr.verify import is_scannable, verify

        results = verify(image, expected_data=url)
        for r in results:
            status = "PASS" if r.success else "FAIL"
            print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
        return 0 if is_scannable(results) else 1
    return 0


def cmd_verify(args) -> int:
    """Decode a QR image with every available decoder."""
    with Image.open(args.image) as img:
        image = img.convert("RGB")

    from heartqr.verify import verify

    results = verify(image, expected_data=args.expected)

    all_pass = True
    for r in results:
        status = "PASS" if r.success else "FAIL"
        all_pass = all_pass and r.success
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
    return 0 if all_pass else 1


def cmd_budget(args) -> int:
    """Estimate how much of the error-correction budget the heart mask uses."""
    from heartqr.budget import estimate_budget
    from heartqr.config import Look, StyleConfig
    from heartqr.encoder import encode
    from heartqr.urls import validate_url

    matrix = encode(validate_url(args.url))
    look = Look(heart_size_factor=args.size_factor)
    style = StyleConfig.from_names(color_mode=args.mode, timing_protected=args.protect_timing)
    budget = estimate_budget(matrix, style, look, max_use=args.max_budget_use)
    print(budget.summary())
    return 0 if budget.safe else 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heartqr", description="Heart-shaped, still scannable, QR codes")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON log lines on the console too")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p_render = subparsers.add_parser("render", help="Render a heart QR code")
    p_render.add_argument("url", help="URL to encode (https:// is added when missing)")
    p_render.add_argument("-o", "--output", default=None, help="Output PNG (default: heart-qr_<url>.png)")
    p_render.add_argument("-s", "--size", type=int, default=DEFAULT_SIZE, choices=SIZE_PRESETS,
                          help="Target output size in pixels")
    p_render.add_argument("--color", default="#000000", help="Primary module colour (hex)")
    p_render.add_argument("--heart-color", default="#E63946", help="Heart colour (hex)")
    p_render.add_argument("--pattern", default="none",
                          choices=["none", "dots", "stripes", "grid", "noise"], help="Background pattern")
    p_render.add_argument("--pattern-color", default="#000000", help="Background pattern colour (hex)")
    p_render.add_argument("--module-style", default="filled-square",
                          choices=["filled-square", "rounded-dot", "heart-clip"], help="Module shape")
    p_render.add_argument("--mode", default="dual", choices=["dual", "mask"],
                          help="dual: colour the heart; mask: draw data modules only inside it")
    p_render.add_argument("--protect-timing", action="store_true", help="Keep timing lines out of the heart mask")
    p_render.add_argument("--seed", type=int, default=0, help="Seed for the noise pattern")
    p_render.add_argument("--strict-budget", action="store_true",
                          help="Fail instead of warning when the mask exceeds the error budget")
    p_render.add_argument("--max-budget-use", type=float, default=MAX_BUDGET_USE,
                          help="Share of the error budget the mask may use (default 0.95)")
    p_render.add_argument("--verify", action="store_true", help="Decode the result with pyzbar and OpenCV")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify a QR code image")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    # --- budget ---
    p_budget = subparsers.add_parser("budget", help="Estimate error-correction budget use")
    p_budget.add_argument("url", help="URL to encode")
    p_budget.add_argument("--mode", default="mask", choices=["dual", "mask"])
    p_budget.add_argument("--size-factor", type=float, default=0.92, help="Heart shrink factor (<= 1)")
    p_budget.add_argument("--protect-timing", action="store_true")
    p_budget.add_argument("--max-budget-use", type=float, default=MAX_BUDGET_USE)

    return parser


COMMANDS = {
    "render": cmd_render,
    "verify": cmd_verify,
    "budget": cmd_budget,
}


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging before any command runs
    setup_logging(level="DEBUG" if args.verbose else "INFO",
                  log_file=args.log_file, json_format=args.json_logs)

    if args.command is None:
        parser.print_help()
        return 1

    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)
    try:
        status = COMMANDS[args.command](args)
    except (HeartQRError, OSError) as e:
        log.error("%s failed: %s", args.command, e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    audit("cli.done", logger=log, command=args.command, status=status)
    return status


if __name__ == "__main__":
    sys.exit(main())
