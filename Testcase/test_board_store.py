"""
Board store: load/save round trip, atomic file writes, failure handling.
"""

import json
import os
import sys
import tempfile
import threading

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bingo_constants import CELL_COUNT
from bingo_errors import PersistenceFailure
from board_fakes import FailingPersistence, MemoryPersistence
from board_store import BoardStore, JsonFilePersistence, empty_state, make_state


def sample_state(marked_indices=(), bingo=False):
    activities = [f"Cell {i}" for i in range(CELL_COUNT)]
    marked = [i in marked_indices for i in range(CELL_COUNT)]
    return make_state(activities, marked, bingo)


def test_load_missing_file_is_empty_state():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = BoardStore(JsonFilePersistence(os.path.join(tmpdir, 'state.json')))
        assert store.load() == empty_state()
        assert store.current() == {
            'boardActivities': None, 'markedCells': None, 'isBingoAchieved': False,
        }


def test_round_trip_through_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'state.json')
        state = sample_state(marked_indices=(0, 6, 12), bingo=True)

        store = BoardStore(JsonFilePersistence(path))
        store.load()
        store.save(state)

        # Simulated restart
        restarted = BoardStore(JsonFilePersistence(path))
        assert restarted.load() == state
        assert restarted.current() == store.current()

        with open(path) as f:
            on_disk = json.load(f)
        assert set(on_disk) == {'boardActivities', 'markedCells', 'isBingoAchieved'}


def test_atomic_write_leaves_no_temp_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'state.json')
        store = BoardStore(JsonFilePersistence(path))
        store.save(sample_state())
        store.save(sample_state(marked_indices=(1,)))
        assert os.listdir(tmpdir) == ['state.json']


def test_corrupt_file_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'state.json')
        with open(path, 'w') as f:
            f.write("{not json")
        store = BoardStore(JsonFilePersistence(path))
        assert store.load() == empty_state()


def test_wrong_length_starts_empty():
    bad = {'boardActivities': ['a'] * 3, 'markedCells': [False] * 3, 'isBingoAchieved': False}
    store = BoardStore(MemoryPersistence(bad))
    assert store.load() == empty_state()


def test_missing_bingo_flag_defaults_false():
    data = sample_state(marked_indices=(3,))
    del data['isBingoAchieved']
    store = BoardStore(MemoryPersistence(data))
    assert store.load()['isBingoAchieved'] is False
    assert store.current()['markedCells'][3] is True


def test_current_is_a_copy():
    store = BoardStore(MemoryPersistence())
    store.save(sample_state())
    view = store.current()
    view['markedCells'][0] = True
    assert store.current()['markedCells'][0] is False


def test_save_failure_updates_memory_and_reports():
    persistence = FailingPersistence()
    store = BoardStore(persistence)
    with pytest.raises(PersistenceFailure):
        store.save(sample_state(marked_indices=(4,)))
    assert store.current()['markedCells'][4] is True
    assert store.is_dirty


def test_shutdown_retries_unsaved_state():
    persistence = FailingPersistence()
    store = BoardStore(persistence)
    with pytest.raises(PersistenceFailure):
        store.save(sample_state(marked_indices=(4,)))

    persistence.fail_writes = False
    store.shutdown()
    assert not store.is_dirty
    assert persistence.data['markedCells'][4] is True


def test_shutdown_without_changes_does_not_write():
    persistence = MemoryPersistence()
    store = BoardStore(persistence)
    store.load()
    store.shutdown()
    assert persistence.writes == 0


def test_mutate_saves_on_success_only():
    persistence = MemoryPersistence()
    store = BoardStore(persistence)
    store.save(sample_state())
    writes = persistence.writes

    with store.mutate() as state:
        state['markedCells'][2] = True
    assert persistence.writes == writes + 1
    assert persistence.data['markedCells'][2] is True

    with pytest.raises(RuntimeError):
        with store.mutate() as state:
            raise RuntimeError("rejected before change")
    assert persistence.writes == writes + 1


def test_concurrent_mutations_do_not_lose_updates():
    persistence = MemoryPersistence()
    store = BoardStore(persistence)
    store.save(sample_state())

    def mark(index):
        with store.mutate() as state:
            marked = list(state['markedCells'])
            marked[index] = True
            state['markedCells'] = marked

    threads = [threading.Thread(target=mark, args=(i,)) for i in range(CELL_COUNT)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.current()['markedCells'] == [True] * CELL_COUNT
    assert persistence.data['markedCells'] == [True] * CELL_COUNT


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
