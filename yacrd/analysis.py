import sys
from enum import Enum
from typing import NamedTuple, List
from dataclasses import dataclass

import numpy as np

from .parser import parse_file

NOT_COVERED_RATIO = 0.8
COVERAGE_MAX = np.iinfo(np.uint8).max

class Gap(NamedTuple):
    start: int
    end: int

    @property
    def length(self):
        return abs(self.end - self.start)

class ReadKind(Enum):
    CHIMERIC = "Chimeric"
    NOT_COVERED = "Not_covered"

@dataclass
class ReadReport:
    name: str
    length: int
    kind: ReadKind
    gaps: List[Gap]

def coverage(length, intervals):
    """
    Per-base depth of a read, saturating at 255.

    Ends past the read length are clipped. Depth is accumulated on a
    difference array so each interval costs O(1) before the final cumsum.
    """
    delta = np.zeros(length + 1, dtype=np.int64)
    for beg, end in intervals:
        end = min(end, length)
        if beg >= end: continue
        delta[beg] += 1
        delta[end] -= 1
    depth = np.cumsum(delta[:length])
    return np.minimum(depth, COVERAGE_MAX).astype(np.uint8)

def find_gaps(cov, coverage_min):
    """Split the low-coverage runs of `cov` into (middle, extremity) gaps."""
    if coverage_min < 0:
        raise ValueError("coverage_min must be non-negative")

    length = len(cov)
    low = np.zeros(length + 2, dtype=bool)
    low[1:-1] = cov <= min(coverage_min, COVERAGE_MAX)
    edges = np.flatnonzero(low[1:] != low[:-1])

    middle, extremity = [], []
    for beg, end in zip(edges[0::2], edges[1::2]):
        gap = Gap(int(beg), int(end))
        if gap.start == gap.end: continue
        if gap.start == 0 or gap.end == length: extremity.append(gap)
        else: middle.append(gap)
    return middle, extremity

def classify(name, length, middle, extremity):
    if len(middle) > 0:
        return ReadReport(name, length, ReadKind.CHIMERIC, list(middle))
    for gap in extremity:
        if gap.length > NOT_COVERED_RATIO * length:
            return ReadReport(name, length, ReadKind.NOT_COVERED, [gap])
    return None

def format_report(report):
    gaps = "".join("{},{},{};".format(gap.length, gap.start, gap.end) for gap in report.gaps)
    return "{}:{},{};{}\n".format(report.kind.value, report.name, report.length, gaps)

def analyze(index, coverage_min):
    for key, intervals in index:
        cov = coverage(key.length, intervals)
        middle, extremity = find_gaps(cov, coverage_min)
        report = classify(key.name, key.length, middle, extremity)
        if not report is None: yield report

def find_chimera(path, coverage_min, out=None):
    if out is None: out = sys.stdout

    index = parse_file(path)

    remove_reads = set()
    for report in analyze(index, coverage_min):
        out.write(format_report(report))
        remove_reads.add(report.name)
    out.flush()

    return remove_reads
