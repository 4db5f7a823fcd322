"""COBS/R (COBS Reduced) encoder/decoder.

Plain COBS always costs one byte of overhead. COBS/R avoids it whenever the
final data byte is at least as large as the final length code would be: the
final code byte is replaced by the final data byte, and that byte is dropped
from the end of the frame.

The decoder tells the two forms apart because a substituted final code
always claims more bytes than remain in the frame, which plain COBS would
reject as truncated. Frames without a substitution are plain COBS frames, so
either decoder reads them.

Examples::

    encode(b"\\x2F\\xA2\\x00\\x92\\x73\\x26") == b"\\x03\\x2F\\xA2\\x26\\x92\\x73"
    encode(b"\\x2F\\xA2\\x00\\x92\\x73\\x02") == b"\\x03\\x2F\\xA2\\x04\\x92\\x73\\x02"
"""

from __future__ import annotations

from bytestuff import cobs
from bytestuff.utils.sink import BoundedSink, GrowableSink, as_bytes

encode_max_output_size = cobs.encode_max_output_size
decode_min_output_size = cobs.decode_min_output_size


def encode_min_output_size(input_len: int) -> int:
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    return max(input_len, 1)


def decode_max_output_size(input_len: int) -> int:
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    return input_len


def _finish(data: bytes, sink, code_index: int, run: int) -> None:
    code = run + 1
    last_value = data[-1] if run else 0

    # Never substitute into a full 0xFF block
    if run and code < 0xFF and last_value >= code:
        sink.patch(code_index, last_value)
        sink.truncate(len(sink) - 1)
    else:
        sink.patch(code_index, code)


def encode_iter(iterable):
    """Encode an iterable of byte values with COBS/R, yielding stuffed byte values."""
    run = yield from cobs.encode_stream_blocks(iterable)
    code = len(run) + 1
    if run and code < 0xFF and run[-1] >= code:
        yield run[-1]
        yield from run[:-1]
    else:
        yield code
        yield from run


def decode_iter(iterable):
    """Decode an iterable of COBS/R byte values, yielding payload byte values."""
    return cobs.decode_stream(iterable, reduced=True)


def encode(data: bytes) -> bytes:
    """Encode data using COBS/R. Does NOT append a 0x00 delimiter."""
    data = as_bytes(data)
    sink = GrowableSink()
    code_index, run = cobs.encode_blocks(data, sink)
    _finish(data, sink, code_index, run)
    return sink.getvalue()


def encode_into(buffer, data: bytes) -> int:
    """Encode into a writable buffer. Returns the number of bytes written.

    The buffer must hold the plain COBS encoding even when the substitution
    shortens the result; size it with encode_max_output_size().
    """
    data = as_bytes(data)
    sink = BoundedSink(buffer)
    code_index, run = cobs.encode_blocks(data, sink)
    _finish(data, sink, code_index, run)
    return len(sink)


def decode(data: bytes) -> bytes:
    """Decode COBS/R-encoded data. Input should NOT include trailing 0x00 delimiter.

    Raises UnexpectedZero on a zero byte. A short final block is read as a
    substitution, never as TruncatedBlock.
    """
    data = as_bytes(data)
    sink = GrowableSink()
    cobs.decode_blocks(data, sink, reduced=True)
    return sink.getvalue()


def decode_into(buffer, data: bytes) -> int:
    data = as_bytes(data)
    sink = BoundedSink(buffer)
    cobs.decode_blocks(data, sink, reduced=True)
    return len(sink)
