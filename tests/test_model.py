"""
tests/test_model.py: hash function, KeyValue and IniSection slot arrays.
"""

import pytest

from inidict.dictionary import (
    AllocationError,
    IniSection,
    InvalidArgumentError,
    KeyValue,
    SortState,
    dictionary_hash,
)
from inidict.dictionary.consts import ENTRY_MIN_SIZE
from inidict.dictionary.model import locate


# ---------------------------------------------------------------------------
# dictionary_hash
# ---------------------------------------------------------------------------

class TestDictionaryHash:
    def test_none_and_empty_hash_to_zero(self):
        assert dictionary_hash(None) == 0
        assert dictionary_hash("") == 0

    def test_known_vectors(self):
        assert dictionary_hash("a") == 0xCA2E9442
        assert dictionary_hash(
            "The quick brown fox jumps over the lazy dog") == 0x519E91F5

    def test_deterministic(self):
        assert dictionary_hash("Pizza") == dictionary_hash("Pizza")

    def test_fits_in_32_bits(self):
        for key in ("x" * 1000, "Über", "名字", "\x7f\x80"):
            assert 0 <= dictionary_hash(key) < 2 ** 32

    def test_case_sensitive(self):
        assert dictionary_hash("Pizza") != dictionary_hash("pizza")


class TestKeyValue:
    def test_hash_follows_key(self):
        kv = KeyValue("cup", "3")
        assert kv.hash == dictionary_hash("cup")

    def test_hash_is_not_an_init_argument(self):
        with pytest.raises(TypeError):
            KeyValue("cup", "3", 42)

    def test_only_value_is_assignable(self):
        kv = KeyValue("cup", "3")
        kv.value = "4"
        assert kv.value == "4"
        with pytest.raises(AttributeError):
            kv.key = "plate"
        with pytest.raises(AttributeError):
            kv.hash = 0
        assert kv.key == "cup"
        assert kv.hash == dictionary_hash("cup")

    def test_found_pair_keeps_section_searchable(self):
        sect = IniSection("Table")
        sect.put("cup", "3")
        sect.sort_by_hash()
        with pytest.raises(AttributeError):
            sect.find("cup").key = "plate"
        assert sect["cup"] == "3"
        assert sect.find("plate") is None


# ---------------------------------------------------------------------------
# IniSection
# ---------------------------------------------------------------------------

class TestIniSectionPut:
    def test_put_then_find(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        assert sect.find("Ham").value == "yes"
        assert sect["Ham"] == "yes"

    def test_update_keeps_slot(self):
        sect = IniSection("Pizza")
        first = sect.put("Ham", "yes")
        second = sect.put("Ham", "no")
        assert first is second
        assert sect["Ham"] == "no"
        assert sect.count == 1

    def test_named_section_starts_without_room(self):
        sect = IniSection("Pizza")
        assert sect.capacity == 0
        sect.put("Ham", "yes")
        assert sect.capacity == ENTRY_MIN_SIZE

    def test_grows_by_fixed_step(self):
        sect = IniSection(None, ENTRY_MIN_SIZE)
        for i in range(ENTRY_MIN_SIZE + 1):
            sect.put(f"k{i}", str(i))
        assert sect.capacity == 2 * ENTRY_MIN_SIZE
        assert len(sect) == ENTRY_MIN_SIZE + 1

    def test_insert_breaks_hash_order(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect.sort_by_hash()
        assert sect.order is SortState.HASH_ORDERED
        sect.put("Fish", "no")
        assert sect.order is SortState.UNORDERED

    def test_update_keeps_hash_order(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect.sort_by_hash()
        sect.put("Ham", "no")
        assert sect.order is SortState.HASH_ORDERED

    def test_rejects_non_strings(self):
        sect = IniSection("Pizza")
        with pytest.raises(InvalidArgumentError):
            sect.put("Ham", 1)
        with pytest.raises(InvalidArgumentError):
            sect.put(None, "yes")
        assert sect.count == 0

    def test_failed_growth_adds_nothing(self, monkeypatch):
        sect = IniSection(None, ENTRY_MIN_SIZE)
        for i in range(ENTRY_MIN_SIZE):
            sect.put(f"k{i}", str(i))

        def refuse(self):
            raise AllocationError("no memory")

        monkeypatch.setattr(IniSection, "_grow", refuse)
        with pytest.raises(AllocationError):
            sect.put("one_more", "x")
        assert sect.count == ENTRY_MIN_SIZE
        assert "one_more" not in sect
        # updates need no room
        sect.put("k0", "changed")
        assert sect["k0"] == "changed"

    def test_memory_error_becomes_allocation_error(self, monkeypatch):
        sect = IniSection("Pizza")

        class NoRoom(list):
            def extend(self, _):
                raise MemoryError

        sect._slots = NoRoom()
        with pytest.raises(AllocationError):
            sect.put("Ham", "yes")
        assert sect.count == 0


class TestIniSectionErase:
    def test_erase_leaves_tombstone(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect.put("Fish", "no")
        assert sect.erase("Ham") is True
        assert sect.find("Ham") is None
        assert sect.count == 2  # slot kept
        assert len(sect) == 1
        assert list(sect) == ["Fish"]

    def test_erase_absent(self):
        sect = IniSection("Pizza")
        assert sect.erase("Ham") is False

    def test_erase_breaks_hash_order(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect.sort_by_hash()
        sect.erase("Ham")
        assert sect.order is SortState.UNORDERED

    def test_del_absent_raises(self):
        sect = IniSection("Pizza")
        with pytest.raises(KeyError):
            del sect["Ham"]

    def test_reinsert_after_erase_appends(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect.erase("Ham")
        sect.put("Ham", "again")
        assert sect.count == 2
        assert sect["Ham"] == "again"


class TestIniSectionSort:
    KEYS = ["Ham", "Mushrooms", "Capres", "Cheese", "Fish", "Parrots"]

    def _filled(self):
        sect = IniSection("Pizza")
        for i, key in enumerate(self.KEYS):
            sect.put(key, str(i))
        return sect

    def test_hash_sort_orders_by_hash(self):
        sect = self._filled()
        sect.sort_by_hash()
        hashes = [kv.hash for kv in sect.pairs()]
        assert hashes == sorted(hashes)

    def test_binary_search_finds_everything(self):
        sect = self._filled()
        sect.sort_by_hash()
        for i, key in enumerate(self.KEYS):
            assert sect[key] == str(i)
        assert sect.find("Pepper") is None

    def test_name_sort(self):
        sect = self._filled()
        sect.sort_by_hash()
        sect.sort_by_name()
        assert list(sect) == sorted(self.KEYS)
        assert sect.order is SortState.UNORDERED
        assert sect["Fish"] == "4"

    def test_name_sort_clusters_tombstones_first(self):
        sect = self._filled()
        sect.erase("Fish")
        sect.erase("Capres")
        sect.sort_by_name()
        assert sect._slots[0] is None and sect._slots[1] is None
        assert list(sect) == sorted(set(self.KEYS) - {"Fish", "Capres"})

    def test_hash_sort_with_tombstones(self):
        sect = self._filled()
        sect.erase("Cheese")
        sect.sort_by_hash()
        assert sect._slots[0] is None
        assert sect.find("Cheese") is None
        assert sect["Parrots"] == "5"

    def test_sorting_empty_section_is_noop(self):
        sect = IniSection("Empty")
        sect.sort_by_hash()
        assert sect.order is SortState.UNORDERED
        sect.sort_by_name()
        assert sect.count == 0


class TestCollisions:
    def test_colliding_keys_stay_apart(self, weak_hash):
        sect = IniSection("Pizza")
        sect.put("ab", "1")
        sect.put("cd", "2")
        assert sect["ab"] == "1"
        assert sect["cd"] == "2"
        assert sect.find("ef") is None

    def test_binary_search_scans_collision_run(self, weak_hash):
        sect = IniSection("Pizza")
        for key in ("fff", "a", "ee", "b", "dd", "c"):
            sect.put(key, key.upper())
        sect.sort_by_hash()
        assert [kv.hash for kv in sect.pairs()] == [1, 1, 1, 2, 2, 3]
        for key in ("a", "b", "c", "dd", "ee", "fff"):
            assert sect[key] == key.upper()
        assert sect.find("zz") is None
        assert sect.find("zzzz") is None

    def test_locate_skips_tombstones(self, weak_hash):
        slots = [None, KeyValue("ab", "1"), None, KeyValue("cd", "2")]
        ident = lambda kv: kv.key  # noqa: E731
        assert locate(slots, 4, "cd", 2, False, ident) == 3
        assert locate(slots, 4, "xy", 2, False, ident) == -1

    def test_locate_binary_with_leading_tombstones(self, weak_hash):
        slots = [None, None, KeyValue("a", "1"), KeyValue("bb", "2"),
                 KeyValue("cc", "3"), None]
        ident = lambda kv: kv.key  # noqa: E731
        assert locate(slots, 5, "cc", 2, True, ident) == 4
        assert locate(slots, 5, "bb", 2, True, ident) == 3
        assert locate(slots, 5, "a", 1, True, ident) == 2
        assert locate(slots, 5, "zzz", 3, True, ident) == -1


class TestIniSectionMisc:
    def test_release_makes_section_inert(self):
        sect = IniSection("Pizza")
        sect.put("Ham", "yes")
        sect._release()
        assert sect.count == 0
        assert sect.capacity == 0
        assert len(sect) == 0

    def test_str(self):
        assert str(IniSection("Pizza")) == "[Pizza]"
        assert str(IniSection()) == "<header>"

    def test_header_hash_is_zero(self):
        assert IniSection().hash == 0
        assert IniSection("Pizza").hash == dictionary_hash("Pizza")
