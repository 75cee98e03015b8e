import argparse
import statistics
import sys
import time

from pollctl.core.client import FrameClient
from pollframe.core.models.inputs import KEY_SLOTS, KeyCode

KEYS = {
    "left": KeyCode.ArrowLeft,
    "up": KeyCode.ArrowUp,
    "right": KeyCode.ArrowRight,
    "down": KeyCode.ArrowDown,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pollctl",
        description=(
            "Probe a running pollframe server.\n\n"
            "Opens one kept-alive connection, fetches the bootstrap page, then\n"
            "posts input vectors and reports frame sizes and pacing."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("--host", default="127.0.0.1", help="Server address (default: 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, default=8080, help="Server port (default: 8080)")
    parser.add_argument("-n", "--frames", type=int, default=10, help="Number of frames to request (default: 10)")
    parser.add_argument(
        "-k", "--key",
        action="append",
        default=[],
        choices=sorted(KEYS),
        help="Arrow key to hold while requesting frames, may be repeated"
    )
    parser.add_argument("--slots", type=int, default=KEY_SLOTS, help="Input vector length")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds")
    return parser


def run(args: argparse.Namespace, out=sys.stdout) -> int:
    held = [KEYS[name] for name in args.key]
    gaps: list[float] = []

    with FrameClient(args.host, args.port, timeout=args.timeout) as client:
        page = client.page()
        print(f"page: {page.status}, {len(page.body)} bytes, content-type={page.content_type}", file=out)

        last = time.monotonic()
        size = 0
        for _ in range(args.frames):
            response = client.frame(held, slots=args.slots)
            now = time.monotonic()
            gaps.append(now - last)
            last = now
            size = len(response.body)

    if gaps:
        print(
            f"frames: {len(gaps)} x {size} bytes, "
            f"gap min={min(gaps) * 1000:.1f}ms "
            f"mean={statistics.fmean(gaps) * 1000:.1f}ms "
            f"max={max(gaps) * 1000:.1f}ms",
            file=out
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except OSError as exc:
        print(f"pollctl: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
