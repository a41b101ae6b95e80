from pathlib import Path

from .parser import Format
from .utils import Tokenizer, FormatError

FASTA_SUFFIXES = (".fa", ".fasta", ".fna")

def filter_overlaps(in_path, out, removed):
    """Copy the overlap lines of `in_path` that involve no read of `removed`."""
    fmt = Format.from_path(in_path)
    kept = 0
    with open(str(in_path), "rb") as f:
        for lineno, line in enumerate(Tokenizer(f), 1):
            if len(line) == 0: continue
            try: alignment = fmt.parse_line(line, only_names=True)
            except FormatError as err:
                raise FormatError("{}:{}: {}".format(str(in_path), lineno, err)) from err
            if alignment.first.name in removed or alignment.second.name in removed:
                continue
            out.write(line.view())
            out.write(b"\n")
            kept += 1
    return kept

def filter_fasta(in_path, out, removed):
    kept = 0
    keep = False
    with open(str(in_path), "rb") as f:
        for line in Tokenizer(f):
            if len(line) == 0: continue
            data = line.tobytes()
            if data.startswith(b">"):
                fields = data[1:].split(None, 1)
                name = fields[0].decode("utf-8", "surrogateescape") if fields else ""
                keep = not name in removed
                if keep: kept += 1
            if keep:
                out.write(data)
                out.write(b"\n")
    return kept

def filtered_path(path, suffix="_filtered"):
    path = Path(path)
    return path.with_name(path.stem + suffix + path.suffix)

def filter_file(path, removed, suffix="_filtered"):
    out_path = filtered_path(path, suffix)
    if Path(path).suffix in FASTA_SUFFIXES: method = filter_fasta
    else: method = filter_overlaps
    with open(str(out_path), "wb") as out:
        method(path, out, removed)
    return out_path
