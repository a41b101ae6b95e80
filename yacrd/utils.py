import sys

DEFAULT_CAPACITY = 1 << 14
MAX_DIGITS = 19

def logmsg(msg):
    sys.stderr.write(msg + "\n")
    sys.stderr.flush()

class FormatError(ValueError):
    pass

class StaleSpanError(RuntimeError):
    pass

class StreamBuffer:
    """
    Fixed size window over a byte source exposing readinto().

    Every refill bumps `generation`; spans cut from an older generation are
    no longer backed by the bytes they were cut from.
    """

    def __init__(self, source, capacity=DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("buffer capacity must be positive")
        self._source = source
        self._capacity = capacity
        self.data = bytearray(capacity)
        self.end = 0
        self.eof = False
        self.generation = 0
        self.refill(0)

    def find(self, sep, beg, end=None):
        if end is None: end = self.end
        return self.data.find(sep, beg, end)

    def refill(self, rest):
        """
        Move data[rest:end] to the front and fill the remainder from the source.

        Returns the new offset of the moved tail (always 0), or None once the
        source has been exhausted by an earlier refill.
        """
        if self.eof: return None

        rest_len = self.end - rest

        if rest_len == self._capacity:
            # a single token fills the whole window
            self._capacity *= 2
            data = bytearray(self._capacity)
            data[0:rest_len] = self.data[rest:self.end]
            self.data = data
        else:
            self.data[0:rest_len] = self.data[rest:self.end]

        want = self._capacity - rest_len
        got = self._read_into(rest_len, want)
        self.end = rest_len + got
        if got < want: self.eof = True

        self.generation += 1
        return 0

    def _read_into(self, offset, count):
        total = 0
        with memoryview(self.data) as view:
            while total < count:
                got = self._source.readinto(view[offset+total:offset+count])
                if not got: break
                total += got
        return total

class Span:
    """Zero-copy [begin, end) slice of a StreamBuffer."""

    __slots__ = ("_buffer", "_generation", "begin", "end")

    def __init__(self, buffer, begin, end):
        self._buffer = buffer
        self._generation = buffer.generation
        self.begin = begin
        self.end = end

    def __len__(self):
        return self.end - self.begin

    def __repr__(self):
        if not self.valid: return "Span(<stale>)"
        return "Span({!r})".format(self.tobytes())

    @property
    def valid(self):
        return self._generation == self._buffer.generation

    def _check(self):
        if not self.valid:
            raise StaleSpanError("span used after its buffer was refilled")

    def view(self):
        self._check()
        return memoryview(self._buffer.data)[self.begin:self.end]

    def tobytes(self):
        self._check()
        return bytes(self._buffer.data[self.begin:self.end])

    def decode(self, encoding="utf-8", errors="surrogateescape"):
        return self.tobytes().decode(encoding, errors)

    def fields(self, sep):
        self._check()
        beg = self.begin
        while True:
            it = self._buffer.find(sep, beg, self.end)
            if it < 0:
                yield Span(self._buffer, beg, self.end)
                return
            yield Span(self._buffer, beg, it)
            beg = it + len(sep)

class Tokenizer:

    def __init__(self, source, sep=b"\n", capacity=DEFAULT_CAPACITY):
        self._input = StreamBuffer(source, capacity)
        self._sep = sep
        self._cur = 0
        self._done = False

    @property
    def done(self):
        return self._done

    def next(self, sep=None):
        if sep is None: sep = self._sep

        while True:
            beg = self._cur
            it = self._input.find(sep, beg)
            if it >= 0:
                self._cur = it + len(sep)
                return Span(self._input, beg, it)
            if self._input.refill(beg) is None:
                break
            self._cur = 0

        self._done = True
        self._cur = self._input.end
        return Span(self._input, beg, self._cur)

    def __iter__(self):
        while not self._done:
            yield self.next()

def parse_uint(span):
    data = span.tobytes() if isinstance(span, Span) else bytes(span)
    n = len(data)
    if n == 0 or n > MAX_DIGITS or not data.isdigit():
        raise FormatError("invalid numeral: {!r}".format(data))
    return int(data)
