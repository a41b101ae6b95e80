#!/usr/bin/env python

import io
import sys
import getopt
from pathlib import Path

from .analysis import find_chimera
from .filter import filter_file
from .utils import FormatError, logmsg

coverage_min_default = 0
filtered_suffix_default = "_filtered"

def write_stdout(text):
    # read names may carry undecodable bytes, escaped as surrogates
    out = getattr(sys.stdout, "buffer", None)
    if out is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    sys.stdout.flush()
    out.write(text.encode("utf-8", "surrogateescape"))
    out.flush()

def usage():
    sys.stderr.write("\nUsage: yacrd [options] <overlaps.paf|overlaps.mhap>\n\n")
    sys.stderr.write("Options:\n")
    sys.stderr.write("    -c INT    coverage at or below which a position is a gap [{}]\n".format(coverage_min_default))
    sys.stderr.write("    -o FILE   report output [stdout]\n")
    sys.stderr.write("    -r FILE   write flagged read names, one per line [null]\n")
    sys.stderr.write("    -f FILE   filter flagged reads out of FILE (fasta, paf or mhap); repeatable\n")
    sys.stderr.write("    -s STR    suffix for filtered files [{}]\n".format(filtered_suffix_default))
    sys.stderr.write("    -v        print progress to stderr\n")
    sys.stderr.write("    -h        print help message\n\n")
    sys.stderr.flush()
    return -1

def main(argc, argv):

    if argc < 2: return usage()

    coverage_min = coverage_min_default
    report_fname = None
    removed_fname = None
    filter_fnames = []
    suffix = filtered_suffix_default
    verbose = False

    try: opts, args = getopt.gnu_getopt(argv[1:], "c:o:r:f:s:vh")
    except getopt.GetoptError as err:
        logmsg("error: {}".format(err))
        return usage()

    try:
        for o, a in opts:
            if o == "-h": return usage()
            elif o == "-c": coverage_min = int(a)
            elif o == "-o": report_fname = a
            elif o == "-r": removed_fname = a
            elif o == "-f": filter_fnames.append(a)
            elif o == "-s": suffix = a
            elif o == "-v": verbose = True
    except ValueError:
        logmsg("error: -c expects an integer")
        return usage()

    if coverage_min < 0:
        logmsg("error: -c must be non-negative")
        return usage()

    if len(args) != 1:
        logmsg("error: expected exactly one overlap file")
        return usage()

    overlaps_path = Path(args[0])

    for p in [overlaps_path] + [Path(fname) for fname in filter_fnames]:
        if not p.is_file():
            logmsg("error: file '{}' not found".format(str(p)))
            return usage()

    if verbose: logmsg("finding chimeras in '{}' (coverage_min={})".format(str(overlaps_path), coverage_min))

    try:
        report = io.StringIO()
        remove_reads = find_chimera(overlaps_path, coverage_min, report)

        if not report_fname is None:
            with open(report_fname, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(report.getvalue())
        else:
            write_stdout(report.getvalue())

        if verbose: logmsg("flagged {} reads".format(len(remove_reads)))

        if not removed_fname is None:
            with open(removed_fname, "w", encoding="utf-8", errors="surrogateescape") as f:
                for name in sorted(remove_reads):
                    f.write(name + "\n")

        for fname in filter_fnames:
            out_path = filter_file(fname, remove_reads, suffix)
            if verbose: logmsg("wrote '{}'".format(str(out_path)))

    except (OSError, FormatError) as err:
        logmsg("error: {}".format(err))
        return 1

    return 0

def run():
    return main(len(sys.argv), sys.argv)

if __name__ == "__main__":
    sys.exit(run())
