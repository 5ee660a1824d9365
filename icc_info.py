"""
Inspect the display model stored in an ICC profile: colorant matrix, tone curves and vcgt.
"""

import argparse
import json
import logging
import sys

import numpy as np

from icc_errors import ICCProfileError
from icc_matrix_profile import CHANNEL_NAMES, load_profile
from log import init_logging


def _format_matrix(m):
    return "\n".join("  " + " ".join(f"{v:10.6f}" for v in row) for row in m)


def _describe_curve(curve):
    if curve.type == 'gamma':
        return f"gamma {curve.gamma:.4f}"
    return f"{curve.type} ({len(curve)} entries)"


def cmd_show(profile, args):
    if args.json:
        print(json.dumps(profile.to_dict(samples=args.samples), indent=2))
        return 0

    print("model:   " + ("lut16 reduction (A2B1)" if profile.is_lut_based else "matrix + TRC"))
    print("matrix (RGB -> XYZ, D50):")
    print(_format_matrix(profile.matrix))
    wx, wy = profile.white_xy()
    print(f"white:   x={wx:.4f} y={wy:.4f}")
    for name, (x, y), trc in zip(CHANNEL_NAMES, profile.primaries_xy(), profile.trcs):
        print(f"{name:<6}   x={x:.4f} y={y:.4f}  trc: {_describe_curve(trc)}")
    if profile.vcgt is None:
        print("vcgt:    none")
    else:
        print("vcgt:    " + ", ".join(_describe_curve(c) for c in profile.vcgt))
    return 0


def _selected_curves(profile, args):
    if args.vcgt:
        if profile.vcgt is None:
            raise ICCProfileError("profile has no vcgt tag")
        return profile.vcgt
    return profile.trcs


def cmd_curves(profile, args):
    curves = _selected_curves(profile, args)
    x = np.linspace(0.0, 1.0, args.points)
    tables = [c.table(args.points) for c in curves]
    print("x," + ",".join(CHANNEL_NAMES))
    for i, xi in enumerate(x):
        print(f"{xi:.6f}," + ",".join(f"{t[i]:.6f}" for t in tables))
    return 0


def cmd_plot(profile, args):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    curves = _selected_curves(profile, args)
    x = np.linspace(0.0, 1.0, 1024)
    fig, ax = plt.subplots(figsize=(6, 6))
    for name, curve in zip(CHANNEL_NAMES, curves):
        ax.plot(x, curve.sample(x), color=name, label=name)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xlabel("input")
    ax.set_ylabel("vcgt output" if args.vcgt else "linear light")
    ax.set_title(args.profile)
    ax.legend()
    fig.savefig(args.output, dpi=100)
    plt.close(fig)
    logging.info("wrote %s", args.output)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="icc-info", description=__doc__.strip())
    parser.add_argument("-v", "--verbose", action="store_true", help="log every tag that is decoded")
    parser.add_argument("--log-file", help="also write a DEBUG log to this file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_show = sub.add_parser("show", help="print matrix, chromaticities and curve types")
    p_show.add_argument("profile")
    p_show.add_argument("--json", action="store_true", help="print as JSON")
    p_show.add_argument("--samples", type=int, default=None,
                        help="with --json, resample every curve to this many points")
    p_show.set_defaults(func=cmd_show)

    p_curves = sub.add_parser("curves", help="print sampled curves as CSV")
    p_curves.add_argument("profile")
    p_curves.add_argument("--points", type=int, default=256)
    p_curves.add_argument("--vcgt", action="store_true", help="print the vcgt instead of the TRCs")
    p_curves.set_defaults(func=cmd_curves)

    p_plot = sub.add_parser("plot", help="save a plot of the curves")
    p_plot.add_argument("profile")
    p_plot.add_argument("output", help="image path, e.g. curves.png")
    p_plot.add_argument("--vcgt", action="store_true", help="plot the vcgt instead of the TRCs")
    p_plot.set_defaults(func=cmd_plot)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "points", 2) < 2:
        parser.error("--points must be at least 2")
    if getattr(args, "samples", None) is not None and args.samples < 2:
        parser.error("--samples must be at least 2")

    handlers = init_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
    try:
        profile = load_profile(args.profile)
        return args.func(profile, args)
    except (ICCProfileError, OSError) as e:
        logging.error("%s: %s", args.profile, e)
        return 1
    finally:
        root_logger = logging.getLogger()
        for h in handlers:
            root_logger.removeHandler(h)
            h.close()


if __name__ == "__main__":
    sys.exit(main())
