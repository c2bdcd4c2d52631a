"""
Concurrent creation: the storage-level uniqueness check must resolve races.
"""
import threading
from concurrent.futures import ThreadPoolExecutor

from shortlink_app.config import ShortenerOptions
from shortlink_app.repositories.strategies import InMemoryShortLinkRepository
from shortlink_app.services.hash_strategies import HashGenerator, RandomHashGenerator
from shortlink_app.services.shortener_service import ShortenerService


class SharedSequenceGenerator(HashGenerator):
    """Thread-safe generator handing out a fixed sequence"""

    def __init__(self, *hashes):
        self.hashes = list(hashes)
        self.calls = 0
        self._lock = threading.Lock()

    def generate(self, length):
        with self._lock:
            self.calls += 1
            return self.hashes.pop(0)


class RendezvousRepository(InMemoryShortLinkRepository):
    """
    Holds callers checking `hash` until two of them have checked it, so
    both see it as free before either inserts.
    """

    def __init__(self, hash):
        super().__init__()
        self.hash = hash
        self.barrier = threading.Barrier(2)

    def find_by_hash(self, hash):
        result = super().find_by_hash(hash)
        if hash == self.hash:
            self.barrier.wait(timeout=5)
        return result


class TestConcurrentCreate:
    """Test creates running in parallel threads"""

    def test_race_on_same_candidate_is_resolved_by_one_retry(self):
        repository = RendezvousRepository("SAME1")
        generator = SharedSequenceGenerator("SAME1", "SAME1", "OTHR2")
        shortener = ShortenerService(repository, generator=generator, options=ShortenerOptions())

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(shortener.create, "https://example.com/same") for _ in range(2)]
            links = [future.result(timeout=10) for future in futures]

        assert sorted(link.hash for link in links) == ["OTHR2", "SAME1"]
        assert generator.calls == 3
        assert len(repository) == 2

    def test_many_threads_never_share_a_hash(self):
        """Length 1 forces heavy contention and growth"""
        repository = InMemoryShortLinkRepository()
        shortener = ShortenerService(
            repository,
            generator=RandomHashGenerator(),
            options=ShortenerOptions(hash_length=1),
        )

        def create_many(worker):
            return [shortener.create(f"https://example.com/{worker}/{i}").hash for i in range(50)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(create_many, range(8)))

        hashes = [h for batch in results for h in batch]
        assert len(hashes) == 400
        assert len(set(hashes)) == 400
        assert len(repository) == 400
