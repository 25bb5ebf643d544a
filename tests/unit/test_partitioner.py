"""
Unit tests for the partitioner
Tests chunk counts, balance, contiguity and invalid worker counts
"""

import unittest

from common.errors import PartitionError
from coordinator.partitioner import Chunk, partition


class TestPartitioner(unittest.TestCase):
    """Unit tests for partition()"""

    def test_zero_records_gives_zero_chunks(self):
        self.assertEqual(partition(0, 4), [])

    def test_fewer_records_than_workers(self):
        chunks = partition(3, 8)
        self.assertEqual(len(chunks), 3)
        self.assertTrue(all(len(c) == 1 for c in chunks))

    def test_even_split(self):
        chunks = partition(8, 4)
        self.assertEqual([(c.start, c.end) for c in chunks], [(0, 2), (2, 4), (4, 6), (6, 8)])

    def test_remainder_goes_to_leading_chunks(self):
        chunks = partition(10, 4)
        self.assertEqual([len(c) for c in chunks], [3, 3, 2, 2])

    def test_single_worker_takes_everything(self):
        self.assertEqual(partition(5, 1), [Chunk(index=0, start=0, end=5)])

    def test_chunks_are_balanced_contiguous_and_complete(self):
        for n in range(0, 51):
            for w in range(1, 13):
                chunks = partition(n, w)
                self.assertEqual(len(chunks), min(n, w))

                covered = []
                for i, chunk in enumerate(chunks):
                    self.assertEqual(chunk.index, i)
                    self.assertGreater(len(chunk), 0)
                    covered.extend(range(chunk.start, chunk.end))
                self.assertEqual(covered, list(range(n)), f"n={n} w={w}")

                if chunks:
                    sizes = [len(c) for c in chunks]
                    self.assertLessEqual(max(sizes) - min(sizes), 1)

    def test_deterministic(self):
        self.assertEqual(partition(1001, 7), partition(1001, 7))

    def test_rejects_zero_workers(self):
        with self.assertRaises(PartitionError):
            partition(10, 0)

    def test_rejects_negative_workers(self):
        with self.assertRaises(PartitionError):
            partition(10, -2)

    def test_rejects_negative_record_count(self):
        with self.assertRaises(PartitionError):
            partition(-1, 2)

    def test_rebased_chunk_starts_at_zero(self):
        chunk = Chunk(index=3, start=30, end=40)
        self.assertEqual(chunk.rebased(), Chunk(index=3, start=0, end=10))


if __name__ == '__main__':
    unittest.main()
