#!/usr/bin/env python3
"""
flowmarch command-line interface.

Usage:
    python -m flowmarch --field rotation --x0 1,0 --y0 0,1 --dt 0.01 --tmax 6.28 --scheme ab2
    python -m flowmarch --field uniform --field-param u0=1 --x0 0 --y0 0 --print 0
    python -m flowmarch ... --export out.json --plot paths.png
    python -m flowmarch --version
"""

import argparse
import sys
from typing import Dict, List, Optional


def _float_list(text: str) -> List[float]:
    try:
        return [float(item) for item in text.split(",") if item.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers, got '{text}'")


def _field_param(text: str):
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    try:
        return key.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value for '{key}' must be a number, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    from .fields import available_fields, BACKENDS
    from .integrators import available_schemes

    parser = argparse.ArgumentParser(
        prog="flowmarch",
        description="flowmarch - explicit time marching of particles in 2D velocity fields",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m flowmarch --field rotation --x0 1 --y0 0 --dt 0.01 --tmax 1 --print 0
  python -m flowmarch --field double_gyre --x0 0.5,1.5 --y0 0.5,0.5 --scheme ab2 --export gyre.json
""",
    )
    parser.add_argument("--version", action="version", version=f"flowmarch {get_version()}")

    parser.add_argument("--dt", type=float, default=0.1, help="time step (default: 0.1)")
    parser.add_argument("--tmax", type=float, default=1.0, help="time horizon (default: 1.0)")
    parser.add_argument("--x0", type=_float_list, default=[0.0], help="initial x positions, comma-separated")
    parser.add_argument("--y0", type=_float_list, default=[0.0], help="initial y positions, comma-separated")

    parser.add_argument("--field", default="uniform", choices=available_fields(),
                        help="analytic velocity field (default: uniform)")
    parser.add_argument("--field-param", type=_field_param, action="append", default=[],
                        metavar="KEY=VALUE", help="field parameter, repeatable (e.g. omega=2)")
    parser.add_argument("--backend", default="python", choices=list(BACKENDS),
                        help="field evaluation backend (default: python)")
    parser.add_argument("--scheme", default=None,
                        help=f"time-marching scheme: {', '.join(available_schemes())} (default: configured)")
    parser.add_argument("--no-check-finite", action="store_true",
                        help="let NaN/Inf velocities propagate instead of failing")

    parser.add_argument("--print", dest="print_particles", type=int, action="append", default=[],
                        metavar="N", help="print trajectory of particle N, repeatable")
    parser.add_argument("--export", metavar="PATH", help="export histories (.json or .h5)")
    parser.add_argument("--plot", metavar="PATH", help="save a trajectory plot (requires matplotlib)")
    parser.add_argument("--summary", action="store_true", help="print trajectory statistics")
    parser.add_argument("--report-dir", metavar="DIR", help="write a summary report into DIR")
    parser.add_argument("--progress", action="store_true", help="show a progress bar")
    parser.add_argument("--quiet", action="store_true", help="suppress informational output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for flowmarch."""
    parser = build_parser()
    args = parser.parse_args(argv)

    from .errors import FlowMarchError, NumericalFailureError, TrajectoryExportError, MarchCancelledError
    from .fields import get_field
    from .tracking import ParticleTracker, TrackerOptions, analyze_trajectory_results

    params: Dict[str, float] = dict(args.field_param)
    options = TrackerOptions(
        check_finite=not args.no_check_finite,
        progress_style="auto" if args.progress else "none",
    )

    try:
        field = get_field(args.field, backend=args.backend, **params)
        tracker = ParticleTracker.from_field(args.dt, args.tmax, args.x0, args.y0, field, options=options)
        tracker.march(args.scheme)
    except (NumericalFailureError, MarchCancelledError) as e:
        print(f"flowmarch: marching failed: {e}", file=sys.stderr)
        return 1
    except FlowMarchError as e:
        print(f"flowmarch: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        info = tracker.summary()
        print(f"Marched {info['num_particles']} particle(s) over {info['step_count']} steps "
              f"with {info['scheme']} in {info.get('elapsed_s', 0.0):.4f}s")

    try:
        for n in args.print_particles:
            tracker.print_trajectory(n)
    except FlowMarchError as e:
        print(f"flowmarch: {e}", file=sys.stderr)
        return 2

    if args.summary:
        analyze_trajectory_results(tracker.trajectory(), verbose=True)

    if args.export:
        try:
            path = tracker.export_to_file(args.export)
        except (TrajectoryExportError, RuntimeError) as e:
            print(f"flowmarch: export failed: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Exported trajectories to {path}")

    if args.report_dir:
        from .utils.reporting import generate_summary_report
        try:
            generate_summary_report(tracker, output_dir=args.report_dir, verbose=not args.quiet)
        except OSError as e:
            print(f"flowmarch: report failed: {e}", file=sys.stderr)
            return 1

    if args.plot:
        from .visualization import plot_trajectories_2d
        try:
            fig, _ = plot_trajectories_2d(tracker.trajectory(), save_path=args.plot)
        except RuntimeError as e:
            print(f"flowmarch: plotting failed: {e}", file=sys.stderr)
            return 1
        import matplotlib.pyplot as plt
        plt.close(fig)
        if not args.quiet:
            print(f"Saved plot: {args.plot}")

    return 0


def get_version():
    """Get flowmarch version."""
    try:
        from flowmarch import __version__
        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
