"""COBS (Consistent Overhead Byte Stuffing) encoder/decoder."""

from __future__ import annotations

from bytestuff.errors import TruncatedBlock, UnexpectedZero
from bytestuff.utils.sink import BoundedSink, GrowableSink, as_bytes

# Longest run of data bytes a single block can carry (code 0xFF).
MAX_RUN = 254


def encode_max_output_size(input_len: int) -> int:
    """Worst-case encoded size for ``input_len`` bytes of payload."""
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    if input_len == 0:
        return 1
    return input_len + (input_len + MAX_RUN - 1) // MAX_RUN


def encode_min_output_size(input_len: int) -> int:
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    return input_len + 1


def decode_max_output_size(input_len: int) -> int:
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    return max(input_len - 1, 0)


def decode_min_output_size(input_len: int) -> int:
    """Smallest payload a stuffed frame of ``input_len`` bytes can decode to.

    The worst case is a frame made only of full 0xFF blocks, which carry no
    implicit zero.
    """
    if input_len < 0:
        raise ValueError(f"Invalid input length: {input_len}")
    if input_len == 0:
        return 0
    return input_len - 1 - (input_len - 1) // 255


def encode_blocks(data: bytes, sink) -> tuple[int, int]:
    """Write every block of ``data`` except the value of the final code byte.

    Returns (code_index, run_length) for the final block: the sink index
    reserved for its code and the number of data bytes written after it.
    The caller patches the code. A full block is only closed with 0xFF when
    another input byte follows it, so a payload ending on a 254-byte run
    leaves run_length == 254 here.
    """
    length = len(data)
    code_index = sink.reserve()
    pos = 0

    while True:
        zero = data.find(0, pos)
        end = length if zero == -1 else zero

        while end - pos >= MAX_RUN and pos + MAX_RUN < length:
            sink.extend(data[pos:pos + MAX_RUN])
            sink.patch(code_index, 0xFF)
            code_index = sink.reserve()
            pos += MAX_RUN

        sink.extend(data[pos:end])
        if zero == -1:
            return code_index, end - pos

        # Run ended by a zero byte: the zero is implicit in the code
        sink.patch(code_index, end - pos + 1)
        code_index = sink.reserve()
        pos = zero + 1


def decode_blocks(data: bytes, sink, reduced: bool = False) -> None:
    """Decode stuffed ``data`` into ``sink``.

    With ``reduced`` set, a final length code that claims more bytes than
    remain is the COBS/R substitution: the remaining bytes are copied and the
    code itself becomes the last payload byte. Otherwise it is an error.
    """
    length = len(data)
    pos = 0

    while pos < length:
        code = data[pos]
        if code == 0:
            raise UnexpectedZero(pos)

        start = pos + 1
        end = pos + code
        block = data[start:end]
        zero = block.find(0)
        if zero != -1:
            raise UnexpectedZero(start + zero)

        if end > length:
            if not reduced:
                raise TruncatedBlock(pos, code - 1, length - start)
            sink.extend(block)
            sink.append(code)
            return

        sink.extend(block)
        pos = end

        # No implicit zero after the final block or after a full block
        if pos < length and code < 0xFF:
            sink.append(0)


def encode_stream_blocks(iterable):
    """Yield the encoding of every block but the last; return the last run.

    Only the current run is held back (at most MAX_RUN bytes), since its
    code byte precedes it and is unknown until the run ends. The caller
    emits the final block from the returned run.
    """
    run = bytearray()
    for byte in iterable:
        if len(run) == MAX_RUN:
            yield 0xFF
            yield from run
            run.clear()
        if byte == 0:
            yield len(run) + 1
            yield from run
            run.clear()
        else:
            run.append(byte)
    return run


def decode_stream(iterable, reduced: bool = False):
    """Yield decoded bytes from an iterable of stuffed bytes.

    Data bytes are yielded as soon as they are read; the implicit zero after
    a block is held until the next code byte shows the block was not final.
    Errors are raised where detected, after the bytes before them have been
    yielded.
    """
    code = 0
    code_offset = 0
    remaining = 0
    pending_zero = False

    for offset, byte in enumerate(iterable):
        if byte == 0:
            raise UnexpectedZero(offset)
        if remaining:
            remaining -= 1
            yield byte
            continue

        if pending_zero:
            yield 0
        code = byte
        code_offset = offset
        remaining = code - 1
        pending_zero = code < 0xFF

    if remaining:
        if not reduced:
            raise TruncatedBlock(code_offset, code - 1, code - 1 - remaining)
        yield code


def encode_iter(iterable):
    """Encode an iterable of byte values, yielding the stuffed byte values.

    ``bytes(encode_iter(data)) == encode(data)``.
    """
    run = yield from encode_stream_blocks(iterable)
    yield len(run) + 1
    yield from run


def decode_iter(iterable):
    """Decode an iterable of stuffed byte values, yielding payload byte values.

    Raises TruncatedBlock or UnexpectedZero like decode(), but only once the
    bad byte (or the end of input) is reached.
    """
    return decode_stream(iterable)


def encode(data: bytes) -> bytes:
    """Encode data using COBS. Does NOT append a 0x00 delimiter."""
    data = as_bytes(data)
    sink = GrowableSink()
    code_index, run = encode_blocks(data, sink)
    sink.patch(code_index, run + 1)
    return sink.getvalue()


def encode_into(buffer, data: bytes) -> int:
    """Encode into a writable buffer. Returns the number of bytes written.

    Raises CapacityExceeded if ``buffer`` is smaller than the encoding;
    size it with encode_max_output_size().
    """
    data = as_bytes(data)
    sink = BoundedSink(buffer)
    code_index, run = encode_blocks(data, sink)
    sink.patch(code_index, run + 1)
    return len(sink)


def decode(data: bytes) -> bytes:
    """Decode COBS-encoded data. Input should NOT include trailing 0x00 delimiter.

    An empty input decodes to an empty payload. Raises TruncatedBlock or
    UnexpectedZero on malformed input.
    """
    data = as_bytes(data)
    sink = GrowableSink()
    decode_blocks(data, sink)
    return sink.getvalue()


def decode_into(buffer, data: bytes) -> int:
    data = as_bytes(data)
    sink = BoundedSink(buffer)
    decode_blocks(data, sink)
    return len(sink)
