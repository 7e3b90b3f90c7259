from __future__ import annotations

import json
import tempfile
import time
import unittest
from pathlib import Path

from astro_baba.cache_manager import CacheEntry, CacheManager, DailyCache


class TestCacheManager(unittest.TestCase):
    def test_ttl_expiry(self) -> None:
        cache = CacheManager(max_items=10)
        cache.set("k", "v", ttl=1)
        self.assertEqual(cache.get("k"), "v")
        time.sleep(1.1)
        self.assertIsNone(cache.get("k"))

    def test_default_ttl_applies_when_none_given(self) -> None:
        cache = CacheManager(max_items=10, default_ttl=1)
        cache.set("k", "v")
        time.sleep(1.1)
        self.assertIsNone(cache.get("k"))

    def test_lru_eviction_when_capacity_exceeded(self) -> None:
        cache = CacheManager(max_items=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        self.assertIsNone(cache.get("a"))
        self.assertEqual(cache.get("b"), 2)
        self.assertEqual(cache.get("c"), 3)

    def test_get_refreshes_lru_order(self) -> None:
        cache = CacheManager(max_items=2)
        cache.set("a", 1)
        cache.set("b", 2)
        _ = cache.get("a")
        cache.set("c", 3)
        self.assertEqual(cache.get("a"), 1)
        self.assertIsNone(cache.get("b"))
        self.assertEqual(cache.get("c"), 3)

    def test_stats_count_hits_and_misses(self) -> None:
        cache = CacheManager(max_items=4)
        cache.set("a", 1)
        cache.get("a")
        cache.get("missing")
        self.assertEqual(cache.stats(), {"items": 1, "max_items": 4, "hits": 1, "misses": 1})
        cache.clear()
        self.assertEqual(len(cache), 0)


def _entry(text: str = "hello") -> CacheEntry:
    return CacheEntry(
        date="2025-07-04",
        sign="leo",
        lang="en",
        text=text,
        generated_at="2025-07-04T06:30:00Z",
        rich={"date": "2025-07-04"},
    )


class TestDailyCache(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_put_writes_one_file_per_key(self) -> None:
        DailyCache(self.root).put("2025-07-04", "leo", "en", _entry())
        path = self.root / "2025-07-04" / "leo.en.json"
        self.assertTrue(path.is_file())
        data = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(data["generatedAt"], "2025-07-04T06:30:00Z")
        self.assertEqual(data["text"], "hello")

    def test_disk_entry_survives_a_new_process(self) -> None:
        DailyCache(self.root).put("2025-07-04", "leo", "en", _entry("from disk"))
        fresh = DailyCache(self.root)
        self.assertEqual(fresh.memory_size(), 0)
        hit = fresh.get("2025-07-04", "leo", "en")
        self.assertEqual(hit.text, "from disk")
        self.assertEqual(fresh.memory_size(), 1)

    def test_keys_are_separate_per_lang(self) -> None:
        cache = DailyCache(self.root)
        cache.put("2025-07-04", "leo", "en", _entry())
        self.assertIsNone(cache.get("2025-07-04", "leo", "hi"))
        self.assertIsNone(cache.get("2025-07-05", "leo", "en"))

    def test_corrupt_file_is_a_miss(self) -> None:
        path = self.root / "2025-07-04" / "leo.en.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("astro_baba", level="WARNING"):
            self.assertIsNone(DailyCache(self.root).get("2025-07-04", "leo", "en"))


if __name__ == "__main__":
    unittest.main()
