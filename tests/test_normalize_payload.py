import copy
import pickle
from datetime import datetime

from pyreqwest_easy.types import UNDEFINED
from pyreqwest_easy.utils import NormalizeOptions, normalize_payload, strip_undefined


def test_trims_by_default():
    assert normalize_payload({"name": "  alice ", "tags": [" a", "b "]}) == {"name": "alice", "tags": ["a", "b"]}


def test_no_trim():
    assert normalize_payload({"name": " alice "}, NormalizeOptions(trim=False)) == {"name": " alice "}


def test_empty_string_to_null_after_trim():
    options = NormalizeOptions(empty_string_to_null=True)
    assert normalize_payload({"a": "   ", "b": "", "c": "x"}, options) == {"a": None, "b": None, "c": "x"}

    untrimmed = NormalizeOptions(trim=False, empty_string_to_null=True)
    assert normalize_payload({"a": "   ", "b": ""}, untrimmed) == {"a": "   ", "b": None}


def test_drop_undefined():
    options = NormalizeOptions(drop_undefined=True)
    payload = {"a": UNDEFINED, "b": None, "c": [1, UNDEFINED, 2], "d": {"e": UNDEFINED}}
    assert normalize_payload(payload, options) == {"b": None, "c": [1, 2], "d": {}}


def test_undefined_kept_by_default():
    assert normalize_payload({"a": UNDEFINED}) == {"a": UNDEFINED}


def test_nested_and_tuples():
    payload = {"user": {"names": (" a ", " b ")}, "rows": [{"x": " 1 "}]}
    assert normalize_payload(payload) == {"user": {"names": ("a", "b")}, "rows": [{"x": "1"}]}


def test_special_objects_pass_through():
    when = datetime(2024, 1, 1)
    data = b"  raw  "

    class Custom(dict):
        pass

    custom = Custom(name=" x ")
    result = normalize_payload({"when": when, "data": data, "custom": custom})

    assert result["when"] is when
    assert result["data"] is data
    assert result["custom"] is custom


def test_input_not_mutated():
    payload = {"name": " alice ", "items": [" a "]}
    normalize_payload(payload)
    assert payload == {"name": " alice ", "items": [" a "]}


def test_options_merge_field_by_field():
    base = NormalizeOptions(trim=True, drop_undefined=True)
    merged = base.merged(NormalizeOptions(trim=False, empty_string_to_null=True))
    assert merged == NormalizeOptions(trim=False, drop_undefined=True, empty_string_to_null=True)
    assert base.merged(None) is base


def test_strip_undefined_for_json():
    payload = {"a": UNDEFINED, "b": [1, UNDEFINED], "c": {"d": UNDEFINED, "e": None}}
    assert strip_undefined(payload) == {"b": [1, None], "c": {"e": None}}


def test_undefined_is_singleton():
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
    assert copy.copy(UNDEFINED) is UNDEFINED
    assert copy.deepcopy({"a": UNDEFINED})["a"] is UNDEFINED
    assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED
