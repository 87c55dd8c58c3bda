#!/usr/bin/env python3
"""
specrt: Specification Runtime

Command-line inspector for the byte codec and the choice sampler.

Usage:
    specrt encode <value> --size N        Encode an integer into N bytes
    specrt decode <hex>                   Decode a byte sequence
    specrt widths <value>                 Encode under every width and byte order
    specrt read <file> --offset O         Decode an integer stored in a file
    specrt pick <low> <high>              Sample a value with the rejection sampler
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
import textwrap
from pathlib import Path

# Ensure specrt package is importable
specrt_root = Path(__file__).resolve().parent.parent
if str(specrt_root) not in sys.path:
    sys.path.insert(0, str(specrt_root))

from kaitaistruct import KaitaiStream

from specrt import (
    ByteCodec,
    BIG_ENDIAN_CODEC,
    LITTLE_ENDIAN_CODEC,
    Signed,
    Unsigned,
    Size,
    SamplerConfig,
    ChoiceSampler,
    UniformInt,
    PickTimeout,
)
from specrt.integer import max_value, min_value

WIDTHS = (1, 2, 4, 8, 16)


# ============================================================================
# Formatting helpers
# ============================================================================

class C:
    """ANSI colors."""
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def off():
        C.BOLD = C.DIM = C.RED = C.GREEN = C.YELLOW = C.CYAN = C.RESET = ""


def header(text: str) -> str:
    return f"\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}\n{C.BOLD}  {text}{C.RESET}\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}"


def ok(text: str) -> str:
    return f"  {C.GREEN}✓{C.RESET} {text}"


def fail(text: str) -> str:
    return f"  {C.RED}✗{C.RESET} {text}"


def dim(text: str) -> str:
    return f"{C.DIM}{text}{C.RESET}"


def hexbytes(data: bytes) -> str:
    return " ".join(f"{b:02x}" for b in data)


def parse_int(text: str) -> int:
    """Decimal, 0x, 0o or 0b literal; underscores allowed."""
    try:
        return int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None


def _codec(args) -> ByteCodec:
    return LITTLE_ENDIAN_CODEC if args.little else BIG_ENDIAN_CODEC


def _signedness(args):
    return Unsigned if args.unsigned else Signed


# ============================================================================
# Commands
# ============================================================================

def cmd_encode(args):
    """Encode one integer."""
    size = Size.from_bytes(args.size)
    signedness = _signedness(args)
    data = _codec(args).encode(signedness, size, args.value)

    if data is None:
        lo, hi = min_value(signedness, size), max_value(signedness, size)
        print(fail(f"{args.value} does not fit {signedness.value} {size.bits}-bit [{lo}, {hi}]"))
        sys.exit(1)
    print(hexbytes(data))


def cmd_decode(args):
    """Decode one byte sequence."""
    try:
        data = bytes.fromhex(args.hex.replace(" ", ""))
    except ValueError as e:
        print(fail(f"Invalid hex: {e}"))
        sys.exit(1)
    if not data:
        print(fail("Nothing to decode"))
        sys.exit(1)
    print(_codec(args).decode(_signedness(args), data))


def cmd_widths(args):
    """Show the encoding of a value under every supported width."""
    print(header(f"WIDTHS: {args.value}"))
    for n in WIDTHS:
        size = Size.from_bytes(n)
        for signedness in (Signed, Unsigned):
            label = f"{'i' if signedness is Signed else 'u'}{size.bits}"
            big = BIG_ENDIAN_CODEC.encode(signedness, size, args.value)
            if big is None:
                print(f"  {label:>5}  {dim('out of range')}")
                continue
            little = LITTLE_ENDIAN_CODEC.encode(signedness, size, args.value)
            print(f"  {label:>5}  be {hexbytes(big)}")
            print(f"  {'':>5}  le {hexbytes(little)}")


def cmd_read(args):
    """Decode an integer stored at an offset in a file."""
    data = Path(args.file).read_bytes()
    stream = KaitaiStream(io.BytesIO(data))
    size = Size.from_bytes(args.size)

    if args.offset < 0 or args.offset > len(data):
        print(fail(f"Offset {args.offset:#x} outside file of {len(data)} bytes"))
        sys.exit(1)
    stream.seek(args.offset)

    try:
        value = _codec(args).read(stream, _signedness(args), size)
    except EOFError:
        print(fail(f"Fewer than {size.bytes} bytes at {args.offset:#x}"))
        sys.exit(1)
    print(value)


def cmd_pick(args):
    """Sample from a uniform range, keeping the first multiple of K."""
    config = SamplerConfig(max_attempts=args.attempts, seed=args.seed)
    sampler = ChoiceSampler(config)
    k = args.multiple_of

    try:
        choice = sampler.pick(UniformInt(args.low, args.high), lambda x: x % k == 0)
    except PickTimeout as e:
        print(fail(str(e)))
        sys.exit(1)

    print(choice.value)
    if args.verbose:
        draws = sampler.history[-1]["draws"]
        print(ok(f"accepted after {draws} draw(s)"), file=sys.stderr)


# ============================================================================
# Main
# ============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="specrt",
        description="Inspect the specrt byte codec and choice sampler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
        examples:
          specrt encode -1 --size 4
          specrt encode 4294967295 --size 4 --unsigned --little
          specrt decode "ff ff ff ff"
          specrt widths -- -129
          specrt read memory.bin --offset 0x10 --size 8 --little
          specrt pick 0 255 --multiple-of 16 --seed 7
        """),
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    def codec_flags(p):
        p.add_argument("--unsigned", action="store_true", help="Unsigned instead of two's complement")
        p.add_argument("--little", action="store_true", help="Little-endian instead of big-endian")

    # encode
    p = sub.add_parser("encode", aliases=["enc"], help="Encode an integer")
    p.add_argument("value", type=parse_int, help="Integer to encode")
    p.add_argument("--size", type=int, default=4, choices=WIDTHS, help="Width in bytes (default: 4)")
    codec_flags(p)

    # decode
    p = sub.add_parser("decode", aliases=["dec"], help="Decode a hex byte sequence")
    p.add_argument("hex", help='Bytes as hex, e.g. "ff fe"')
    codec_flags(p)

    # widths
    p = sub.add_parser("widths", help="Encode under every width and byte order")
    p.add_argument("value", type=parse_int, help="Integer to encode")

    # read
    p = sub.add_parser("read", help="Decode an integer stored in a file")
    p.add_argument("file", help="File to read from")
    p.add_argument("--offset", type=parse_int, default=0, help="Byte offset (default: 0)")
    p.add_argument("--size", type=int, default=4, choices=WIDTHS, help="Width in bytes (default: 4)")
    codec_flags(p)

    # pick
    p = sub.add_parser("pick", help="Sample with the rejection sampler")
    p.add_argument("low", type=parse_int, help="Smallest candidate")
    p.add_argument("high", type=parse_int, help="Largest candidate")
    p.add_argument("--multiple-of", type=parse_int, default=1, help="Accept only multiples of K")
    p.add_argument("--seed", type=parse_int, help="Seed for the random source")
    p.add_argument("--attempts", type=int, default=50, help="Retry budget (default: 50)")

    args = parser.parse_args(argv)

    if args.no_color:
        C.off()
    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    if args.command == "pick":
        if args.multiple_of == 0:
            parser.error("--multiple-of must be non-zero")
        if args.attempts < 1:
            parser.error("--attempts must be at least 1")
        if args.low > args.high:
            parser.error(f"empty range [{args.low}, {args.high}]")

    # Dispatch
    commands = {
        "encode": cmd_encode, "enc": cmd_encode,
        "decode": cmd_decode, "dec": cmd_decode,
        "widths": cmd_widths,
        "read": cmd_read,
        "pick": cmd_pick,
    }

    handler = commands.get(args.command)
    if handler:
        try:
            handler(args)
        except FileNotFoundError as e:
            print(fail(f"File not found: {e}"))
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
