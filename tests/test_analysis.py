import io

import numpy as np
import pytest

from yacrd.analysis import (Gap, ReadKind, ReadReport, coverage, find_gaps, classify,
                            format_report, analyze, find_chimera)
from yacrd.parser import parse_file

def write_paf(path, records):
    # each record: (name1, len1, beg1, end1, name2, len2, beg2, end2)
    with open(str(path), "w") as f:
        for n1, l1, b1, e1, n2, l2, b2, e2 in records:
            f.write("\t".join(str(v) for v in [n1, l1, b1, e1, "+", n2, l2, b2, e2, 0, 0, 255]) + "\n")
    return path

def test_coverage_counts_overlaps():
    cov = coverage(10, [(0, 5), (3, 8)])
    assert cov.dtype == np.uint8
    assert cov.tolist() == [1, 1, 1, 2, 2, 1, 1, 1, 0, 0]

def test_coverage_clips_end():
    assert coverage(4, [(2, 10)]).tolist() == [0, 0, 1, 1]

def test_coverage_saturates():
    cov = coverage(3, [(0, 2)] * 300)
    assert cov.tolist() == [255, 255, 0]

def test_find_gaps_boundaries():
    cov = np.array([0, 0, 1, 1, 0, 0, 1, 1, 0, 0], dtype=np.uint8)
    middle, extremity = find_gaps(cov, 0)
    assert middle == [Gap(4, 6)]
    assert extremity == [Gap(0, 2), Gap(8, 10)]

def test_find_gaps_covered_read_has_no_gap():
    middle, extremity = find_gaps(coverage(100, [(0, 100)]), 0)
    assert middle == [] and extremity == []

def test_find_gaps_threshold():
    cov = np.array([3, 1, 2, 3], dtype=np.uint8)
    middle, extremity = find_gaps(cov, 2)
    assert middle == [Gap(1, 3)]
    assert extremity == []

def test_find_gaps_large_threshold_covers_whole_read():
    middle, extremity = find_gaps(coverage(5, [(0, 5)]), 1 << 40)
    assert extremity == [Gap(0, 5)]

def test_find_gaps_empty_read():
    assert find_gaps(coverage(0, []), 0) == ([], [])

def test_classify_chimeric_wins_over_extremity():
    report = classify("r", 100, [Gap(40, 60)], [Gap(0, 95)])
    assert report.kind is ReadKind.CHIMERIC
    assert report.gaps == [Gap(40, 60)]

def test_classify_not_covered_reports_first_qualifying_gap():
    report = classify("r", 100, [], [Gap(0, 10), Gap(0, 85), Gap(5, 100)])
    assert report == ReadReport("r", 100, ReadKind.NOT_COVERED, [Gap(0, 85)])

def test_classify_ratio_is_strict():
    assert classify("r", 100, [], [Gap(20, 100)]) is None

def test_format_report():
    report = ReadReport("r1", 100, ReadKind.CHIMERIC, [Gap(40, 60), Gap(70, 75)])
    assert format_report(report) == "Chimeric:r1,100;20,40,60;5,70,75;\n"

def test_find_chimera_clean_read(tmp_path):
    path = write_paf(tmp_path / "ovl.paf", [("r0", 100, 0, 100, "r0b", 100, 0, 100)])
    out = io.StringIO()
    assert find_chimera(path, 0, out) == set()
    assert out.getvalue() == ""

def test_find_chimera_chimeric(tmp_path):
    path = write_paf(tmp_path / "ovl.paf", [
        ("r1", 100, 0, 40, "a", 40, 0, 40),
        ("r1", 100, 100, 60, "b", 40, 0, 40),
    ])
    out = io.StringIO()
    assert find_chimera(path, 0, out) == {"r1"}
    assert out.getvalue() == "Chimeric:r1,100;20,40,60;\n"

def test_find_chimera_not_covered(tmp_path):
    path = write_paf(tmp_path / "ovl.paf", [("r2", 100, 0, 15, "c", 15, 0, 15)])
    out = io.StringIO()
    assert find_chimera(path, 0, out) == {"r2"}
    assert out.getvalue() == "Not_covered:r2,100;85,15,100;\n"

def test_find_chimera_defaults_to_stdout(tmp_path, capsys):
    path = write_paf(tmp_path / "ovl.paf", [("r2", 100, 0, 15, "c", 15, 0, 15)])
    find_chimera(path, 0)
    assert capsys.readouterr().out == "Not_covered:r2,100;85,15,100;\n"

def test_find_chimera_mhap(tmp_path):
    path = tmp_path / "ovl.mhap"
    path.write_text("r1 a 0.1 5 0 0 40 100 0 0 0 40 40\nr1 b 0.1 5 0 100 60 100 0 0 0 40 40\n")
    out = io.StringIO()
    assert find_chimera(path, 0, out) == {"r1"}
    assert out.getvalue() == "Chimeric:r1,100;20,40,60;\n"

def test_find_chimera_is_idempotent(tmp_path):
    path = write_paf(tmp_path / "ovl.paf", [
        ("r1", 100, 0, 40, "r2", 100, 0, 15),
        ("r1", 100, 60, 100, "r3", 50, 0, 50),
        ("r3", 50, 0, 50, "r4", 50, 0, 50),
    ])
    first = find_chimera(path, 0, io.StringIO())
    second = find_chimera(path, 0, io.StringIO())
    assert first == second == {"r1", "r2"}

def test_analyze_yields_only_flagged_reads(tmp_path):
    path = write_paf(tmp_path / "ovl.paf", [
        ("r1", 100, 0, 40, "r3", 50, 0, 50),
        ("r1", 100, 60, 100, "r4", 50, 0, 50),
    ])
    reports = list(analyze(parse_file(path), 0))
    assert [(r.name, r.kind) for r in reports] == [("r1", ReadKind.CHIMERIC)]

def test_find_gaps_rejects_negative_threshold():
    with pytest.raises(ValueError):
        find_gaps(coverage(3, []), -1)
