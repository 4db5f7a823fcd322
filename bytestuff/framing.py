"""Zero-delimited framing on top of the COBS codecs.

The codecs never read or write the 0x00 delimiter. These helpers are the
transport side: append the delimiter when sending, split an incoming byte
stream on it when receiving.
"""

import logging

from bytestuff import cobs, cobsr
from bytestuff.errors import DecodeError

logger = logging.getLogger(__name__)

DELIMITER = b"\x00"


def frame(payload: bytes, *, reduced: bool = False) -> bytes:
    """Encode ``payload`` and terminate it with the 0x00 delimiter."""
    codec = cobsr if reduced else cobs
    return codec.encode(payload) + DELIMITER


class FrameReader:
    """Splits a zero-delimited byte stream into decoded payloads.

    Bytes are buffered across feed() calls until a delimiter completes a
    frame. Malformed and oversized frames are dropped and counted; reading
    resumes at the next delimiter.
    """

    def __init__(self, reduced: bool = False, max_frame_size: int | None = None):
        if max_frame_size is not None and max_frame_size <= 0:
            raise ValueError(f"max_frame_size must be positive, got {max_frame_size}")
        self._codec = cobsr if reduced else cobs
        self._max_frame_size = max_frame_size
        self._pending = bytearray()
        self._discarding = False
        self.dropped = 0

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet terminated by a delimiter."""
        return len(self._pending)

    def reset(self) -> None:
        self._pending.clear()
        self._discarding = False

    def feed(self, chunk: bytes) -> list[bytes]:
        """Buffer ``chunk`` and return the payloads of every completed frame."""
        self._pending += chunk
        payloads = []

        while True:
            idx = self._pending.find(0)
            if idx == -1:
                break
            candidate = bytes(self._pending[:idx])
            del self._pending[:idx + 1]

            # Tail of a frame already dropped as oversized
            if self._discarding:
                self._discarding = False
                continue
            if not candidate:
                continue

            payload = self._decode_frame(candidate)
            if payload is not None:
                payloads.append(payload)

        if self._max_frame_size is not None and len(self._pending) > self._max_frame_size:
            # Counted once, when the frame first overflows
            if not self._discarding:
                logger.warning(
                    "Discarding oversized frame: %d bytes pending (max %d)",
                    len(self._pending),
                    self._max_frame_size,
                )
                self.dropped += 1
                self._discarding = True
            self._pending.clear()

        return payloads

    def _decode_frame(self, candidate: bytes) -> bytes | None:
        if self._max_frame_size is not None and len(candidate) > self._max_frame_size:
            logger.warning(
                "Dropping oversized frame: %d bytes (max %d)",
                len(candidate),
                self._max_frame_size,
            )
            self.dropped += 1
            return None

        try:
            return self._codec.decode(candidate)
        except DecodeError as exc:
            logger.warning("Dropping malformed frame (%d bytes): %s", len(candidate), exc)
            self.dropped += 1
            return None
