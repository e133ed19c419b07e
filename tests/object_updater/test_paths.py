"""Tests for path resolution."""

import pytest
from src.object_updater.instructions import add_instructions
from src.object_updater.paths import (
    PathNotWritable,
    UnsupportedKeyKind,
    get_value_at_path,
    parse_path,
    resolve_path,
    set_value_at_path,
)


@pytest.fixture
def deployment():
    return {
        "kind": "Deployment",
        "spec": {
            "replicas": 1,
            "template": {
                "spec": {
                    "containers": [
                        {"name": "app", "image": "app:1.0"},
                        {"name": "sidecar", "image": "sidecar:1.0"},
                    ]
                }
            }
        },
        "ports": {"8080": "http"},
    }


class TestResolveCallable:
    """Tests for tracked selectors."""

    def test_identity_selector(self, deployment):
        """Identity selector yields the root path."""
        assert resolve_path(deployment, lambda d: d) == []

    def test_three_level_selector(self, deployment):
        """Each read is recorded in order."""
        path = resolve_path(deployment, lambda d: d["spec"]["template"]["spec"])
        assert path == ["spec", "template", "spec"]

    def test_list_index(self, deployment):
        """List indices are recorded as ints."""
        path = resolve_path(
            deployment,
            lambda d: d["spec"]["template"]["spec"]["containers"][1]["image"]
        )
        assert path == ["spec", "template", "spec", "containers", 1, "image"]

    def test_short_circuit(self, deployment):
        """Only the branch actually read is recorded."""
        use_template = False
        path = resolve_path(
            deployment,
            lambda d: d["spec"]["template"] if use_template else d["spec"]
        )
        assert path == ["spec"]

    def test_missing_key_is_recorded(self, deployment):
        """Reading a missing key records it and yields None."""
        seen = []

        def selector(d):
            value = d["spec"]["strategy"]
            seen.append(value)
            return value

        assert resolve_path(deployment, selector) == ["spec", "strategy"]
        assert seen == [None]

    def test_get_records_key(self, deployment):
        """tracker.get records like item access."""
        assert resolve_path(deployment, lambda d: d.get("spec").get("replicas")) == [
            "spec", "replicas"
        ]

    def test_membership_not_recorded(self, deployment):
        """'in' and len() inspect without recording."""
        def selector(d):
            if "spec" in d and len(d) > 0:
                return d["spec"]
            return d

        assert resolve_path(deployment, selector) == ["spec"]

    def test_selector_sees_values(self, deployment):
        """Scalars read through the tracker are the real values."""
        captured = {}

        def selector(d):
            captured["kind"] = d["kind"]
            return d

        resolve_path(deployment, selector)
        assert captured["kind"] == "Deployment"

    def test_instruction_key_raises(self, deployment):
        """Reading with a merge instruction as key is rejected."""
        marker = add_instructions("spec", merge_by_name=True)
        with pytest.raises(UnsupportedKeyKind) as exc_info:
            resolve_path(deployment, lambda d: d[marker])
        assert exc_info.value.key == marker

    def test_bool_key_raises(self, deployment):
        """Booleans are not list indices."""
        with pytest.raises(UnsupportedKeyKind):
            resolve_path(deployment, lambda d: d[True])

    def test_tuple_key_raises(self, deployment):
        """Composite keys are rejected."""
        with pytest.raises(UnsupportedKeyKind):
            resolve_path(deployment, lambda d: d[("spec", "replicas")])


CONTAINERS = ["spec", "template", "spec", "containers"]


class TestResolveIteration:
    """Tests for selectors that iterate tracked values."""

    def test_iteration_stops_at_list_end(self, deployment):
        """Iterating a tracked list yields each item once."""
        path = resolve_path(
            deployment,
            lambda d: [c for c in d["spec"]["template"]["spec"]["containers"]][-1]
        )
        assert path == CONTAINERS + [1]

    def test_select_matching_item(self, deployment):
        """The item picked out of a loop is the selected path."""
        path = resolve_path(
            deployment,
            lambda d: next(
                c for c in d["spec"]["template"]["spec"]["containers"]
                if c["name"] == "sidecar"
            )
        )
        assert path == CONTAINERS + [1]

    def test_no_matching_item(self, deployment):
        """With no match the last read is the selected path."""
        path = resolve_path(
            deployment,
            lambda d: next(
                (c for c in d["spec"]["template"]["spec"]["containers"]
                 if c["name"] == "db"),
                None
            )
        )
        assert path == CONTAINERS + [1, "name"]

    def test_items(self, deployment):
        """items() yields tracked values."""
        path = resolve_path(
            deployment,
            lambda d: next(v for k, v in d["spec"].items() if k == "template")
        )
        assert path == ["spec", "template"]

    def test_dict_iteration_yields_keys(self, deployment):
        """Iterating a tracked dict yields plain keys and records nothing."""
        captured = {}

        def selector(d):
            spec = d["spec"]
            captured["keys"] = [k for k in spec]
            return spec

        assert resolve_path(deployment, selector) == ["spec"]
        assert captured["keys"] == ["replicas", "template"]

    def test_returned_value_wins_over_later_reads(self, deployment):
        """Reads made after picking the target do not change the path."""
        def selector(d):
            container = d["spec"]["template"]["spec"]["containers"][0]
            assert d["kind"] == "Deployment"
            return container

        assert resolve_path(deployment, selector) == CONTAINERS + [0]


class TestResolveLiteral:
    """Tests for literal and JSON Pointer selectors."""

    def test_list_path(self, deployment):
        """Literal lists are returned as-is."""
        assert resolve_path(deployment, ["spec", "replicas"]) == ["spec", "replicas"]

    def test_tuple_path(self, deployment):
        """Tuples become lists."""
        assert resolve_path(deployment, ("spec",)) == ["spec"]

    def test_literal_path_rejects_float(self, deployment):
        """Non str/int keys in literal paths are rejected."""
        with pytest.raises(UnsupportedKeyKind):
            resolve_path(deployment, ["spec", 1.5])

    def test_pointer_matches_callable(self, deployment):
        """JSON Pointer resolves to the same path as a tracked selector."""
        pointer = resolve_path(deployment, "/spec/template/spec/containers/0")
        tracked = resolve_path(
            deployment, lambda d: d["spec"]["template"]["spec"]["containers"][0]
        )
        assert pointer == tracked == ["spec", "template", "spec", "containers", 0]

    def test_unsupported_selector(self, deployment):
        """Other selector types are rejected."""
        with pytest.raises(TypeError):
            resolve_path(deployment, 42)


class TestParsePath:
    """Tests for JSON Pointer parsing."""

    def test_root_pointers(self):
        """Empty pointer and '/' are the root."""
        assert parse_path({}, "") == []
        assert parse_path({}, "/") == []

    def test_digits_in_dict_stay_strings(self, deployment):
        """Digit segments stay strings under a dict."""
        assert parse_path(deployment, "/ports/8080") == ["ports", "8080"]

    def test_escapes(self):
        """~1 and ~0 are unescaped."""
        assert parse_path({}, "/a~1b/c~0d") == ["a/b", "c~d"]

    def test_dash_appends_to_list(self, deployment):
        """"-" on a list addresses the slot past its end."""
        assert parse_path(deployment, "/spec/template/spec/containers/-") == CONTAINERS + [2]

    def test_dash_in_dict_is_a_key(self):
        """"-" under a dict is an ordinary field name."""
        assert parse_path({"a": {}}, "/a/-") == ["a", "-"]


class TestGetValueAtPath:
    """Tests for reading values at paths."""

    def test_nested_value(self, deployment):
        """Read through dicts and lists."""
        path = ["spec", "template", "spec", "containers", 0, "image"]
        assert get_value_at_path(deployment, path) == "app:1.0"

    def test_root(self, deployment):
        """Empty path returns the object itself."""
        assert get_value_at_path(deployment, []) is deployment

    def test_missing_returns_none(self, deployment):
        """Missing keys and indices yield None."""
        assert get_value_at_path(deployment, ["spec", "strategy", "type"]) is None
        assert get_value_at_path(deployment, ["spec", "template", "spec", "containers", 9]) is None


class TestSetValueAtPath:
    """Tests for writing values at paths."""

    def test_set_nested_value(self, deployment):
        """Write in place."""
        set_value_at_path(deployment, ["spec", "replicas"], 3)
        assert deployment["spec"]["replicas"] == 3

    def test_creates_dict_intermediates(self):
        """Missing intermediates become dicts."""
        obj = {}
        set_value_at_path(obj, ["metadata", "labels", "app"], "web")
        assert obj == {"metadata": {"labels": {"app": "web"}}}

    def test_creates_list_for_int_key(self):
        """An int key after a missing step creates a padded list."""
        obj = {}
        set_value_at_path(obj, ["items", 1], "x")
        assert obj == {"items": [None, "x"]}

    def test_replaces_scalar_intermediate(self):
        """A scalar in the way is replaced with a container."""
        obj = {"config": None}
        set_value_at_path(obj, ["config", "enabled"], True)
        assert obj == {"config": {"enabled": True}}

    def test_root_raises(self):
        """The root cannot be replaced."""
        with pytest.raises(ValueError):
            set_value_at_path({}, [], 1)

    def test_append_past_end(self):
        """Writing one past the end appends."""
        obj = {"items": ["a"]}
        set_value_at_path(obj, parse_path(obj, "/items/-"), "b")
        assert obj == {"items": ["a", "b"]}

    def test_field_name_on_list_raises(self):
        """A str key cannot be written into a list."""
        obj = {"items": ["a"]}
        with pytest.raises(PathNotWritable) as exc_info:
            set_value_at_path(obj, ["items", "name"], "b")
        assert exc_info.value.key == "name"
        assert obj == {"items": ["a"]}
