"""Shared fixtures: an isolated working directory and sample input files.

Every test runs from its own tmp_path with no COURSEWORK_* environment,
so neither a local config/coursework.yaml nor ./data is ever picked up.
"""

from pathlib import Path

import pytest

from coursework.config.app_config import clear_config_cache


def read_starts(counts: list[int], chrom: str = "chr1") -> str:
    """Read-start file with one `chrom pos count` line per position."""
    return "".join(f"{chrom} {pos} {count}\n" for pos, count in enumerate(counts, start=1))


def genbank_record(name: str, sequence: str, features: list[tuple[str, str, list[str]]]) -> str:
    """GenBank flat-file text with the standard column layout.

    `features` holds (key, location, qualifier lines) tuples.
    """
    lines = [
        f"{'LOCUS':<12}{name:<16}{len(sequence):>12} bp    {'DNA':<7} {'linear':<8} BCT 01-JAN-2020",
        "DEFINITION  Test record.",
        "FEATURES             Location/Qualifiers",
    ]
    for key, location, qualifiers in features:
        lines.append(f"     {key:<16}{location}")
        lines.extend(" " * 21 + q for q in qualifiers)
    lines.append("ORIGIN")
    sequence = sequence.lower()
    for i in range(0, len(sequence), 60):
        chunk = sequence[i:i + 60]
        groups = " ".join(chunk[j:j + 10] for j in range(0, len(chunk), 10))
        lines.append(f"{i + 1:>9} {groups}")
    lines.append("//")
    return "\n".join(lines) + "\n"


HW0_FASTA = ">chr test\nACGTACGTTTGG\nccaaNN\n"

HW1_GENOME1 = ">genome one\nAAAAGATTACA\n"
HW1_GENOME2 = ">genome two\nCCCGATTACACCC\n"

HW2_GENOME = ">markov\nACGTACGTAACCGGTT\nACGN\n"

HW3_SEQUENCE = "acgtacgtacatgaaacccgggtttaaacccgggtttaaacccgggtttaaacccgggtt"
HW3_GENBANK = genbank_record(
    "TEST01",
    HW3_SEQUENCE,
    [
        ("source", "1..60", ['/organism="Test organism"']),
        ("CDS", "11..40", ['/gene="abc"', '/product="hypothetical', 'protein"']),
        ("CDS", "complement(45..58)", ['/gene="xyz"']),
    ],
)

HW4_GRAPH = """\
V a START
V b
V c
V d END
E x a b 3
E y b c -5
E z c d 4
E w a c -1
"""
HW4_GENOME = ">gc test\nAAGCGCAA\n"

HW5_PROTEINS = (">p1\nHEAGAWGHEE\n", ">p2\nPAWHEAE\n", ">p3\nHEAWGE\n")

HW6_READ_STARTS = read_starts([0] * 5 + [3] * 13 + [0] * 2)
HW7_READ_STARTS = read_starts([0] * 30 + [3] * 15 + [0] * 30)

HW8_GENOME = ">hmm\nATATATTAAT\nGCGCGGCCGC\nATTATAATAT\n"

HW9_ALIGNMENT = (
    "# chr1:101-110\n"
    "hg18\tAAAAAAAAAA\n"
    "panTro2\tCCCCCAAAAA\n"
    "mm9\tGGGGGAAAAA\n"
    "\n"
    "# chr1:111-130\n"
    "hg18\tAAAAAAAAAAAAAAAAAAAA\n"
    "panTro2\tAAAAAAAAAAAAAAACCCCC\n"
    "mm9\tAAAAAAAAAAAAAAAGGGGG\n"
)
HW9_NEUTRAL_COUNTS = "AAA\t1\nACG\t3\n"
HW9_CONSERVED_COUNTS = "AAA\t9\nACG\t1\n"

DAY2_INPUT = "A Y\nB X\nC Z\n"

DAY5_INPUT = (
    "    [D]    \n"
    "[N] [C]    \n"
    "[Z] [M] [P]\n"
    " 1   2   3 \n"
    "\n"
    "move 1 from 2 to 1\n"
    "move 3 from 1 to 3\n"
    "move 2 from 2 to 1\n"
    "move 1 from 1 to 2\n"
)

DAY7_INPUT = """\
$ cd /
$ ls
dir a
14848514 b.txt
8504156 c.dat
dir d
$ cd a
$ ls
dir e
29116 f
2557 g
62596 h.lst
$ cd e
$ ls
584 i
$ cd ..
$ cd ..
$ cd d
$ ls
4060174 j
8033020 d.log
5626152 d.ext
7214296 k
"""

DAY8_INPUT = "30373\n25512\n65332\n33549\n35390\n"

SAMPLE_FILES = {
    "hw/hw0/test.fna": HW0_FASTA,
    "hw/hw1/genome1.fna": HW1_GENOME1,
    "hw/hw1/genome2.fna": HW1_GENOME2,
    "hw/hw2/genome.fna": HW2_GENOME,
    "hw/hw3/genome.gbff": HW3_GENBANK,
    "hw/hw4/graph.txt": HW4_GRAPH,
    "hw/hw4/genome.fna": HW4_GENOME,
    "hw/hw5/seq1.fa": HW5_PROTEINS[0],
    "hw/hw5/seq2.fa": HW5_PROTEINS[1],
    "hw/hw5/seq3.fa": HW5_PROTEINS[2],
    "hw/hw6/read_starts.txt": HW6_READ_STARTS,
    "hw/hw7/read_starts.txt": HW7_READ_STARTS,
    "hw/hw8/genome.fna": HW8_GENOME,
    "hw/hw9/alignment.txt": HW9_ALIGNMENT,
    "hw/hw9/STATE1_anc_rep_counts.txt": HW9_NEUTRAL_COUNTS,
    "hw/hw9/STATE2_codon1_2_counts.txt": HW9_CONSERVED_COUNTS,
    "aoc/day2/input.txt": DAY2_INPUT,
    "aoc/day5/input.txt": DAY5_INPUT,
    "aoc/day7/input.txt": DAY7_INPUT,
    "aoc/day8/input.txt": DAY8_INPUT,
}

TEST_CONFIG = """\
seed: 540
settings:
  hw7:
    background_n: 0
  hw8:
    max_iterations: 3
"""


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Run each test from an empty directory with a fresh config cache."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("COURSEWORK_CONFIG", raising=False)
    monkeypatch.delenv("COURSEWORK_DATA_DIR", raising=False)
    clear_config_cache()
    yield workdir
    clear_config_cache()


@pytest.fixture
def write_file(tmp_path):
    """Write a text file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding the default inputs of every registered exercise."""
    root = tmp_path / "data"
    for name, content in SAMPLE_FILES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Config with settings that suit the small sample inputs."""
    path = tmp_path / "coursework.yaml"
    path.write_text(TEST_CONFIG, encoding="utf-8")
    monkeypatch.setenv("COURSEWORK_CONFIG", str(path))
    clear_config_cache()
    return path


@pytest.fixture
def genbank_file(write_file):
    """Write a GenBank record built by `genbank_record` and return its path."""

    def _write(name: str, record: str, sequence: str, features) -> Path:
        return write_file(name, genbank_record(record, sequence, features))

    return _write
