import pytest

from cargohack.features import (
    Feature,
    FeatureKind,
    Features,
    feature_deps,
    feature_powerset,
    group_feature,
    normal_feature,
    path_feature,
    powerset,
)


def test_feature_deps1():
    feature_map = {"a": [], "b": ["a"], "c": ["b"], "d": ["a", "b"]}
    fd = feature_deps(feature_map)
    assert fd == {"a": set(), "b": {"a"}, "c": {"a", "b"}, "d": {"a", "b"}}

    features = [normal_feature(n) for n in ["a", "b", "c", "d"]]
    ps = powerset(features, None)
    assert ps == [
        [],
        ["a"],
        ["b"],
        ["a", "b"],
        ["c"],
        ["a", "c"],
        ["b", "c"],
        ["a", "b", "c"],
        ["d"],
        ["a", "d"],
        ["b", "d"],
        ["a", "b", "d"],
        ["c", "d"],
        ["a", "c", "d"],
        ["b", "c", "d"],
        ["a", "b", "c", "d"],
    ]
    filtered = feature_powerset(features, None, feature_map)
    assert filtered == [[], ["a"], ["b"], ["c"], ["d"], ["c", "d"]]


def test_powerset_full():
    assert powerset([1, 2, 3, 4], None) == [
        [],
        [1],
        [2],
        [1, 2],
        [3],
        [1, 3],
        [2, 3],
        [1, 2, 3],
        [4],
        [1, 4],
        [2, 4],
        [1, 2, 4],
        [3, 4],
        [1, 3, 4],
        [2, 3, 4],
        [1, 2, 3, 4],
    ]


def test_powerset_depth1():
    assert powerset([1, 2, 3, 4], 1) == [[], [1], [2], [3], [4]]


def test_powerset_depth2():
    assert powerset([1, 2, 3, 4], 2) == [
        [],
        [1],
        [2],
        [1, 2],
        [3],
        [1, 3],
        [2, 3],
        [4],
        [1, 4],
        [2, 4],
        [3, 4],
    ]


def test_powerset_depth3():
    assert powerset([1, 2, 3, 4], 3) == [
        [],
        [1],
        [2],
        [1, 2],
        [3],
        [1, 3],
        [2, 3],
        [1, 2, 3],
        [4],
        [1, 4],
        [2, 4],
        [1, 2, 4],
        [3, 4],
        [1, 3, 4],
        [2, 3, 4],
    ]


def test_feature_deps_cycle_excludes_root():
    fd = feature_deps({"a": ["b"], "b": ["a"]})
    assert fd == {"a": {"b"}, "b": {"a"}}


def test_group_feature():
    group = group_feature(["a", "b"])
    assert group.kind is FeatureKind.GROUP
    assert group.name == "a,b"
    assert group.as_group() == ("a", "b")
    assert group.matches("a")
    assert not group.matches("a,b")


def test_path_feature():
    feature = path_feature("dep", "std")
    assert feature.kind is FeatureKind.PATH
    assert feature == "dep/std"
    assert feature.as_group() == ("dep/std",)


def test_normal_feature_equality():
    assert normal_feature("x") == "x"
    assert "x" == normal_feature("x")
    assert normal_feature("x") == Feature(FeatureKind.NORMAL, "x")
    assert not normal_feature("x").matches("y")


def test_feature_powerset_with_group():
    features = [group_feature(["a", "b"]), normal_feature("c")]
    result = feature_powerset(features, None, {"c": ["a", "b"]})
    assert result == [[], ["a,b"], ["c"]]


def test_features_from_package():
    features = Features.from_package(
        feature_names=["default", "std", "serde", "rand"],
        manifest_features={"default": ["std"], "std": ["dep:rand"]},
        optional_deps=["serde", "rand"],
        dependency_features=[("log", ["kv"])],
    )
    assert features.normal == ["default", "std", "rand"]
    assert features.optional_deps == ["serde"]
    assert features.deps_features == ["log/kv"]
    assert features.contains("log/kv")
    assert features.contains("serde")
    assert not features.contains("log")
    assert len(features) == 5


@pytest.mark.parametrize("depth", [None, 1, 2])
def test_powerset_starts_with_empty(depth):
    result = powerset(["x", "y", "z"], depth)
    assert result[0] == []
    if depth is not None:
        assert all(len(s) <= depth for s in result)