"""Entry point: python -m bytestuff [encode|decode]

Reads stdin, writes stdout. Options come from BYTESTUFF_* environment
variables (see bytestuff.config.Settings).

Raw decode output is the payloads written back to back: payloads may hold
0x00 themselves, so no separator can mark where one ends. Set
BYTESTUFF_HEX=1 to get one hex line per frame.
"""

import sys

import structlog

from bytestuff import cobs, cobsr
from bytestuff.config import Settings
from bytestuff.framing import DELIMITER, FrameReader
from bytestuff.logging_config import configure_logging

USAGE = (
    "Usage: python -m bytestuff [encode|decode]\n"
    "  decode writes payloads back to back; set BYTESTUFF_HEX=1 for one hex line per frame"
)


def _read_input(settings: Settings) -> bytes:
    data = sys.stdin.buffer.read()
    if settings.HEX:
        return bytes.fromhex(data.decode("ascii"))
    return data


def run_encode(settings: Settings) -> int:
    log = structlog.get_logger()
    try:
        payload = _read_input(settings)
    except ValueError as exc:
        log.error("invalid hex input", error=str(exc))
        return 1

    codec = cobsr if settings.reduced else cobs
    encoded = codec.encode(payload)
    if settings.APPEND_DELIMITER:
        encoded += DELIMITER

    if settings.HEX:
        sys.stdout.write(encoded.hex() + "\n")
    else:
        sys.stdout.buffer.write(encoded)
    sys.stdout.flush()

    log.info("encoded", variant=settings.VARIANT, input_size=len(payload), output_size=len(encoded))
    return 0


def run_decode(settings: Settings) -> int:
    log = structlog.get_logger()
    try:
        data = _read_input(settings)
    except ValueError as exc:
        log.error("invalid hex input", error=str(exc))
        return 1

    # A final frame without its delimiter is still a frame
    if data and not data.endswith(DELIMITER):
        data += DELIMITER

    reader = FrameReader(reduced=settings.reduced, max_frame_size=settings.MAX_FRAME_SIZE)
    payloads = reader.feed(data)

    for payload in payloads:
        if settings.HEX:
            sys.stdout.write(payload.hex() + "\n")
        else:
            sys.stdout.buffer.write(payload)
    sys.stdout.flush()

    log.info("decoded", variant=settings.VARIANT, frames=len(payloads), dropped=reader.dropped)
    return 1 if reader.dropped else 0


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    command = argv[0] if argv else None

    if command not in ("encode", "decode"):
        if command is not None:
            print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    settings = Settings()
    configure_logging(command, settings.LOG_LEVEL, stream=sys.stderr)

    if command == "encode":
        return run_encode(settings)
    return run_decode(settings)


if __name__ == "__main__":
    sys.exit(main())
