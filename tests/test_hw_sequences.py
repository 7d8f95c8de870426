"""Tests for homeworks 0-2: counts, shared substrings and Markov simulation."""

import random
from collections import Counter

from coursework.core.exercise import ExerciseContext
from coursework.hw import hw0, hw1, hw2
from coursework.hw.hw1 import Source, build_suffix_array, find_shared_substrings


class TestHw0:
    """Nucleotide counts."""

    def test_count_bases(self, data_dir):
        counts = hw0.count_bases(data_dir / "hw/hw0/test.fna")
        assert counts["*"] == 18
        assert counts["A"] == 4
        assert counts["N"] == 2

    def test_run_lines(self, data_dir):
        lines = hw0.run([data_dir / "hw/hw0/test.fna"], ExerciseContext())
        assert lines == ["*=18", "A=4", "C=4", "G=4", "T=4", "N=2"]


class TestSuffixArray:
    """Tests for build_suffix_array."""

    def test_banana(self):
        assert build_suffix_array("banana") == [5, 3, 1, 0, 4, 2]

    def test_matches_naive_sort(self):
        text = "ACGTTGCAACGTAGGA\x00"
        expected = sorted(range(len(text)), key=lambda i: text[i:])
        assert build_suffix_array(text) == expected

    def test_empty(self):
        assert build_suffix_array("") == []


class TestHw1:
    """Longest shared substring."""

    def test_forward_match(self):
        result = find_shared_substrings("AAAAGATTACA", "CCCGATTACACCC")
        assert result.longest_length == 7
        assert result.match_string == "GATTACA"
        assert result.unique_matches == 1
        assert result.positions == [(Source.FIRST, 4), (Source.SECOND, 3)]

    def test_reverse_strand_match(self):
        """A match against the reverse complement is reported on the reverse strand."""
        # reverse complement of TTTGCATGCC is GGCATGCAAA
        result = find_shared_substrings("ACGGCATGCAAA", "TTTGCATGCCT")
        assert result.match_string == "GGCATGCAAA"
        assert (Source.SECOND_REVERSE, 1) in result.positions

    def test_histogram_counts_every_first_genome_suffix(self):
        result = find_shared_substrings("ACGT", "TTTT")
        assert sum(result.histogram.values()) == 4

    def test_run_report(self, data_dir):
        inputs = [data_dir / "hw/hw1/genome1.fna", data_dir / "hw/hw1/genome2.fna"]
        lines = hw1.run(inputs, ExerciseContext())
        assert lines[0] == "Fasta 1: genome1.fna"
        assert "The longest match length: 7" in lines
        assert "Match string: GATTACA" in lines
        assert "Strand: forward" in lines
        assert "Position: 5" in lines


class TestHw2:
    """Frequencies and Markov simulation."""

    def test_pairs_cross_line_breaks(self, data_dir):
        dist, header, non_alpha = hw2.count_bases(data_dir / "hw/hw2/genome.fna")
        assert header == ">markov"
        assert non_alpha == 0
        assert dist.base_count == 20
        assert dist.pair_count == 19
        assert dist.pair_counts[("T", "A")] == 3
        assert dist.pair_counts[("G", "N")] == 1

    def test_conditional_frequencies_sum_to_one(self, data_dir):
        dist, _, _ = hw2.count_bases(data_dir / "hw/hw2/genome.fna")
        for prev in hw2.BASES:
            total = sum(dist.conditional_freq(prev, b) for b in hw2.BASES)
            assert abs(total - 1.0) < 1e-9

    def test_markov_1_follows_transitions(self):
        """A model that only ever sees A->C and C->A alternates."""
        dist = hw2.FrequencyDistribution(
            base_counts=Counter({"A": 5, "C": 5}),
            pair_counts=Counter({("A", "C"): 5, ("C", "A"): 4}),
        )
        sequence = hw2.generate_sequence(dist, 12, random.Random(1), use_previous=True)
        assert "AA" not in sequence
        assert "CC" not in sequence

    def test_generation_is_seeded(self):
        dist = hw2.equal_distribution()
        first = hw2.generate_sequence(dist, 50, random.Random(9), use_previous=False)
        second = hw2.generate_sequence(dist, 50, random.Random(9), use_previous=False)
        assert first == second
        assert set(first) <= set("ACGT")

    def test_run_writes_simulations(self, data_dir, tmp_path):
        out = tmp_path / "sim"
        context = ExerciseContext(output_dir=out, rng=random.Random(540))
        lines = hw2.run([data_dir / "hw/hw2/genome.fna"], context)
        for name, _, _ in hw2.SIMULATIONS:
            written = (out / name).read_text(encoding="utf-8").splitlines()
            assert written[0] == f">{name[:-3]}"
            assert len("".join(written[1:])) == 20
        assert "Fasta 4: simulated_markov_1.fa" in lines
        assert "Conditional Frequency Matrix:" in lines
