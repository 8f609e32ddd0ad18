"""libcobs command line: encode/decode hex, fuzz, talk COBS over a serial port.

Usage:
    python -m libcobs encode 11220033
    python -m libcobs decode 031122023300
    python -m libcobs fuzz --iterations 5000 --seed 1
    python -m libcobs serial-send --port /dev/ttyACM0 deadbeef
    python -m libcobs serial-recv --port /dev/ttyACM0 --count 3
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from libcobs.config import CobsConfig, ShortReadPolicy, load_config
from libcobs.errors import CobsError
from libcobs.io.memory import MemorySink, MemorySource
from libcobs.recv import CobsReceiver
from libcobs.send import CobsSender

if TYPE_CHECKING:
    from libcobs.io.serial_transport import SerialPort

log = logging.getLogger(__name__)


def _hex_arg(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}") from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="libcobs", description="COBS frame codec")
    p.add_argument("--config", default=None, help="YAML config file path")
    p.add_argument("--log-level", default="WARNING", help="Log level")
    p.add_argument(
        "--short-read",
        choices=[m.value for m in ShortReadPolicy],
        default=None,
        help="Receiver short-read policy (default: from config)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Encode a hex payload into one frame")
    enc.add_argument("payload", type=_hex_arg)

    dec = sub.add_parser("decode", help="Decode one hex frame (delimiter included)")
    dec.add_argument("frame", type=_hex_arg)

    fz = sub.add_parser("fuzz", help="Randomized encode/decode loopback")
    fz.add_argument("--iterations", type=int, default=None)
    fz.add_argument("--max-len", type=int, default=None)
    fz.add_argument("--seed", type=int, default=None)

    ss = sub.add_parser("serial-send", help="Send one hex payload as a frame")
    ss.add_argument("--port", default=None, help="Serial port (default: from config)")
    ss.add_argument("--baudrate", type=int, default=None)
    ss.add_argument("payload", type=_hex_arg)

    sr = sub.add_parser("serial-recv", help="Receive frames and print them as hex")
    sr.add_argument("--port", default=None, help="Serial port (default: from config)")
    sr.add_argument("--baudrate", type=int, default=None)
    sr.add_argument("--count", type=int, default=1, help="Frames to receive")

    return p.parse_args(argv)


def _print_stats(label: str, stats: tuple[int, int]) -> None:
    raw, encoded = stats
    print(f"{label}: raw={raw} encoded={encoded}", file=sys.stderr)


def _cmd_encode(args: argparse.Namespace, cfg: CobsConfig) -> None:
    sink = MemorySink()
    sender = CobsSender(sink)
    sender.send(args.payload)
    print(sink.getvalue().hex())
    _print_stats("sent", sender.stats().get())


def _cmd_decode(args: argparse.Namespace, cfg: CobsConfig) -> None:
    receiver = CobsReceiver(
        MemorySource(args.frame), short_read_policy=cfg.decoder.short_read_policy
    )
    print(receiver.recv().hex())
    _print_stats("received", receiver.stats().get())


def _cmd_fuzz(args: argparse.Namespace, cfg: CobsConfig) -> None:
    from libcobs.fuzz import run

    summary = run(
        iterations=args.iterations if args.iterations is not None else cfg.fuzz.iterations,
        max_len=args.max_len if args.max_len is not None else cfg.fuzz.max_len,
        seed=args.seed if args.seed is not None else cfg.fuzz.seed,
        policy=cfg.decoder.short_read_policy,
    )
    print(
        f"ok: {summary.iterations} frames, {summary.raw_bytes} raw -> "
        f"{summary.encoded_bytes} encoded (x{summary.overhead:.4f}), seed={summary.seed}"
    )


def _serial_port(args: argparse.Namespace, cfg: CobsConfig) -> SerialPort:
    from libcobs.io.serial_transport import SerialPort

    if args.port is not None:
        cfg.serial.port = args.port
    if args.baudrate is not None:
        cfg.serial.baudrate = args.baudrate
    return SerialPort.from_config(cfg.serial)


def _cmd_serial_send(args: argparse.Namespace, cfg: CobsConfig) -> None:
    with _serial_port(args, cfg) as port:
        sender = CobsSender(port)
        sender.send(args.payload)
        _print_stats("sent", sender.stats().get())


def _cmd_serial_recv(args: argparse.Namespace, cfg: CobsConfig) -> None:
    with _serial_port(args, cfg) as port:
        receiver = CobsReceiver(port, short_read_policy=cfg.decoder.short_read_policy)
        for _ in range(args.count):
            print(receiver.recv().hex(), flush=True)
        _print_stats("received", receiver.stats().get())


_COMMANDS = {
    "encode": _cmd_encode,
    "decode": _cmd_decode,
    "fuzz": _cmd_fuzz,
    "serial-send": _cmd_serial_send,
    "serial-recv": _cmd_serial_recv,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    cfg = load_config(args.config)
    if args.short_read is not None:
        cfg.decoder.short_read_policy = ShortReadPolicy(args.short_read)

    try:
        _COMMANDS[args.command](args, cfg)
    except CobsError as e:
        log.error("%s failed: %s", args.command, e)
        return 1
    except OSError as e:
        log.error("%s: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
