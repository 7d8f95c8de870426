"""Tests for the FASTA reader."""

from coursework.utils.read import NO_HEADER, load_fasta, reverse_complement


class TestLoadFasta:
    """Tests for load_fasta."""

    def test_sequence_header_and_counts(self, write_file):
        path = write_file("x.fna", ">first\nacgt\n>second\nNNx-A C\n")
        fasta = load_fasta(path)
        assert fasta.file_name == "x.fna"
        assert fasta.header == ">second"
        assert fasta.sequence == "ACGTNNAC"
        assert fasta.counts["N"] == 2
        assert fasta.non_alpha_count == 2
        assert fasta.total == 8

    def test_no_header(self, write_file):
        path = write_file("bare.fna", "ACGT\n")
        assert load_fasta(path).header == NO_HEADER

    def test_custom_alphabet(self, write_file):
        path = write_file("p.fa", ">p\nhea-gaw\n")
        fasta = load_fasta(path, alphabet="AEGHW")
        assert fasta.sequence == "HEAGAW"
        assert fasta.non_alpha_count == 1

    def test_stats_lines(self, write_file):
        path = write_file("s.fna", ">s\nAAC\n")
        assert load_fasta(path).stats_lines() == [
            "Non-alphabetic characters: 0",
            ">s",
            "*=3",
            "A=2",
            "C=1",
            "G=0",
            "T=0",
            "N=0",
        ]

    def test_reverse_complement(self):
        assert reverse_complement("AACGTX") == "NACGTT"
