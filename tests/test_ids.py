import re

from utils.ids import gen_id


def test_format():
    assert re.fullmatch(r"grn_[0-9a-z]{9}_[0-9a-z]{6}", gen_id("grn"))


def test_ids_sort_by_creation():
    ids = [gen_id("mv") for _ in range(200)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)
