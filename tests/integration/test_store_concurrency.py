"""
Concurrency tests for the flat-file store.

Read-modify-write on the JSON files must not lose updates when requests
run on several threads of one process.
"""
import json
import threading

from core.storage import FlatFileStore


def run_concurrently(target, count):
    barrier = threading.Barrier(count)
    errors = []

    def worker():
        barrier.wait()
        try:
            target()
        except Exception as e:  # collected and asserted by the caller
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(count)]

    # Start all threads
    for t in threads:
        t.start()

    # Wait for completion
    for t in threads:
        t.join(timeout=10)

    return errors


class TestFlatFileConcurrency:

    def test_two_concurrent_increments_from_five(self, tmp_path):
        (tmp_path / 'visitors.json').write_text(json.dumps({'count': 5}))
        store = FlatFileStore(tmp_path)

        errors = run_concurrently(store.increment, 2)

        assert errors == []
        assert json.loads((tmp_path / 'visitors.json').read_text()) == {'count': 7}

    def test_many_concurrent_increments(self, tmp_path):
        store = FlatFileStore(tmp_path)

        def bump_ten_times():
            for _ in range(10):
                store.increment()

        errors = run_concurrently(bump_ten_times, 8)

        assert errors == []
        assert json.loads((tmp_path / 'visitors.json').read_text()) == {'count': 80}

    def test_separate_instances_share_the_file_lock(self, tmp_path):
        stores = [FlatFileStore(tmp_path) for _ in range(4)]
        iterator = iter(stores)
        lock = threading.Lock()

        def bump_with_own_store():
            with lock:
                store = next(iterator)
            for _ in range(10):
                store.increment()

        errors = run_concurrently(bump_with_own_store, 4)

        assert errors == []
        assert FlatFileStore(tmp_path).increment() == 41

    def test_concurrent_appends_keep_every_record(self, tmp_path):
        store = FlatFileStore(tmp_path)
        counter = iter(range(1000))
        lock = threading.Lock()

        def append_five():
            for _ in range(5):
                with lock:
                    n = next(counter)
                store.append('contacts', {'name': f'visitor-{n}'})

        errors = run_concurrently(append_five, 6)

        assert errors == []
        names = {r['name'] for r in store.list('contacts')}
        assert len(names) == 30
