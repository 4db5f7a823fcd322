"""Exceptions raised by the COBS and COBS/R codecs."""


class CobsError(Exception):
    pass


class CapacityExceeded(CobsError):
    """A fixed-capacity output buffer is too small for the result."""

    def __init__(self, capacity: int):
        super().__init__(f"Output buffer too small (capacity {capacity} bytes)")
        self.capacity = capacity


class DecodeError(CobsError):
    """Stuffed input is malformed. ``offset`` is where decoding stopped."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class TruncatedBlock(DecodeError):
    def __init__(self, offset: int, claimed: int, available: int):
        super().__init__(
            f"Length code claims {claimed} data bytes, only {available} remain",
            offset,
        )
        self.claimed = claimed
        self.available = available


class UnexpectedZero(DecodeError):
    def __init__(self, offset: int):
        super().__init__("Unexpected zero byte in stuffed data", offset)
