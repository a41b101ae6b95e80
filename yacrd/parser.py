from enum import Enum
from pathlib import Path
from typing import NamedTuple, Dict, List
from dataclasses import dataclass

from .utils import Tokenizer, FormatError, parse_uint

class ReadKey(NamedTuple):
    name: str
    length: int

class Interval(NamedTuple):
    begin: int
    end: int

@dataclass
class AlignmentSpan:
    name: str = ""
    length: int = 0
    begin: int = 0
    end: int = 0

@dataclass
class Alignment:
    first: AlignmentSpan
    second: AlignmentSpan

def _take(fields, what):
    try: return next(fields)
    except StopIteration:
        raise FormatError("missing field: {}".format(what)) from None

def _skip(fields, count, what):
    for i in range(count): _take(fields, what)

def paf_line(line, only_names=False):
    it = line.fields(b"\t")
    first, second = AlignmentSpan(), AlignmentSpan()

    first.name = _take(it, "query name").decode()

    if not only_names:
        first.length = parse_uint(_take(it, "query length"))
        first.begin = parse_uint(_take(it, "query begin"))
        first.end = parse_uint(_take(it, "query end"))
        _skip(it, 1, "strand")
    else:
        _skip(it, 4, "query fields")

    second.name = _take(it, "target name").decode()

    if not only_names:
        second.length = parse_uint(_take(it, "target length"))
        second.begin = parse_uint(_take(it, "target begin"))
        second.end = parse_uint(_take(it, "target end"))

    return Alignment(first, second)

def mhap_line(line, only_names=False):
    it = line.fields(b" ")
    first, second = AlignmentSpan(), AlignmentSpan()

    first.name = _take(it, "query name").decode()
    second.name = _take(it, "target name").decode()

    if not only_names:
        _skip(it, 3, "score fields")
        first.begin = parse_uint(_take(it, "query begin"))
        first.end = parse_uint(_take(it, "query end"))
        first.length = parse_uint(_take(it, "query length"))

        _skip(it, 2, "target strand fields")
        second.begin = parse_uint(_take(it, "target begin"))
        second.end = parse_uint(_take(it, "target end"))
        second.length = parse_uint(_take(it, "target length"))

    return Alignment(first, second)

class Format(Enum):
    PAF = "paf"
    MHAP = "mhap"

    @classmethod
    def from_path(cls, path):
        if Path(path).suffix == ".mhap": return cls.MHAP
        return cls.PAF

    def parse_line(self, line, only_names=False):
        if self is Format.MHAP: return mhap_line(line, only_names)
        return paf_line(line, only_names)

class ReadIntervalIndex:

    def __init__(self):
        self._read2mapping: Dict[ReadKey, List[Interval]] = {}

    def __len__(self):
        return len(self._read2mapping)

    def __contains__(self, key):
        return key in self._read2mapping

    def __getitem__(self, key):
        return self._read2mapping[key]

    def __iter__(self):
        return iter(self._read2mapping.items())

    def _insert(self, span):
        beg, end = span.begin, span.end
        if beg > end: beg, end = end, beg

        key = ReadKey(span.name, span.length)
        created = not key in self._read2mapping
        if created: self._read2mapping[key] = []
        self._read2mapping[key].append(Interval(beg, end))
        return created

    def insert(self, alignment):
        ins_first = self._insert(alignment.first)
        ins_second = self._insert(alignment.second)
        return ins_first or ins_second

def iter_alignments(path, only_names=False):
    """
    Decode every non-empty line of an overlap file.

    The format is picked once from the file suffix. A malformed line aborts
    the whole file with a FormatError naming the file and line.
    """
    fmt = Format.from_path(path)
    with open(str(path), "rb") as f:
        for lineno, line in enumerate(Tokenizer(f), 1):
            if len(line) == 0: continue
            try: alignment = fmt.parse_line(line, only_names)
            except FormatError as err:
                raise FormatError("{}:{}: {}".format(str(path), lineno, err)) from err
            yield alignment

def parse_file(path, index=None):
    if index is None: index = ReadIntervalIndex()
    for alignment in iter_alignments(path):
        index.insert(alignment)
    return index
