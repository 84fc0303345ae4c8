"""Cargo feature representation and feature-combination generation."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass


class FeatureKind(enum.Enum):
    """The kind of a Cargo feature."""

    NORMAL = "normal"
    GROUP = "group"
    PATH = "path"


@dataclass(frozen=True, eq=False)
class Feature:
    """A Cargo feature: a plain feature, a group of features, or a dependency feature."""

    kind: FeatureKind
    name: str
    members: tuple[str, ...] = ()

    def as_group(self) -> tuple[str, ...]:
        """Return the feature names this feature stands for."""
        if self.kind is FeatureKind.GROUP:
            return self.members
        return (self.name,)

    def matches(self, s: str) -> bool:
        """Return True if ``s`` is one of the names this feature stands for."""
        return s in self.as_group()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.name == other
        if isinstance(other, Feature):
            return (self.kind, self.name, self.members) == (
                other.kind,
                other.name,
                other.members,
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name


def normal_feature(name: str) -> Feature:
    """Create a feature of the current package."""
    return Feature(FeatureKind.NORMAL, name)


def group_feature(names: Iterable[str]) -> Feature:
    """Create a group of features treated as one."""
    members = tuple(names)
    return Feature(FeatureKind.GROUP, ",".join(members), members)


def path_feature(parent: str, name: str) -> Feature:
    """Create a feature of a dependency, written ``parent/name``."""
    return Feature(FeatureKind.PATH, f"{parent}/{name}")


class Features:
    """The features of a package, split into normal, optional-dependency and dependency features."""

    def __init__(
        self,
        normal: Iterable[Feature] = (),
        optional_deps: Iterable[Feature] = (),
        deps_features: Iterable[Feature] = (),
    ) -> None:
        self._normal = list(normal)
        self._optional_deps = list(optional_deps)
        self._deps_features = list(deps_features)

    @classmethod
    def from_package(
        cls,
        feature_names: Iterable[str],
        manifest_features: Mapping[str, Iterable[str]],
        optional_deps: Iterable[str],
        dependency_features: Iterable[tuple[str, Iterable[str]]] = (),
    ) -> Features:
        """Build the feature list of a package.

        ``feature_names`` are the package's feature keys, ``manifest_features``
        the feature table as written in the manifest, ``optional_deps`` the
        names of optional dependencies and ``dependency_features`` pairs of a
        dependency's (possibly renamed) name and its feature names.
        """
        namespaced = {
            value[len("dep:"):]
            for values in manifest_features.values()
            for value in values
            if value.startswith("dep:")
        }
        optional = [name for name in optional_deps if name not in namespaced]
        normal = [normal_feature(name) for name in feature_names if name not in optional]
        deps = [
            path_feature(dep_name, feature)
            for dep_name, features in dependency_features
            for feature in features
        ]
        return cls(normal, (normal_feature(name) for name in optional), deps)

    @property
    def normal(self) -> list[Feature]:
        return list(self._normal)

    @property
    def optional_deps(self) -> list[Feature]:
        return list(self._optional_deps)

    @property
    def deps_features(self) -> list[Feature]:
        return list(self._deps_features)

    def __iter__(self) -> Iterator[Feature]:
        yield from self._normal
        yield from self._optional_deps
        yield from self._deps_features

    def __len__(self) -> int:
        return len(self._normal) + len(self._optional_deps) + len(self._deps_features)

    def contains(self, name: str) -> bool:
        """Return True if any feature has exactly this name."""
        return any(feature.name == name for feature in self)


def feature_deps(feature_map: Mapping[str, Sequence[str]]) -> dict[str, set[str]]:
    """Return, for each feature, the set of features it enables transitively (excluding itself)."""
    result: dict[str, set[str]] = {}
    for root in sorted(feature_map):
        seen: set[str] = set()
        stack = [root]
        while stack:
            current = stack.pop()
            for dep in feature_map.get(current, ()):
                if dep != root and dep not in seen:
                    seen.add(dep)
                    stack.append(dep)
        result[root] = seen
    return result


def powerset(items: Iterable, depth: int | None = None) -> list[list]:
    """Return all subsets of ``items`` in generation order, limited to ``depth`` elements."""
    acc: list[list] = [[]]
    for elem in items:
        extension = [subset + [elem] for subset in acc]
        if depth is not None:
            extension = [subset for subset in extension if len(subset) <= depth]
        acc.extend(extension)
    return acc


def feature_powerset(
    features: Iterable[Feature],
    depth: int | None,
    feature_map: Mapping[str, Sequence[str]],
) -> list[list[Feature]]:
    """Return the feature powerset, dropping combinations where one feature already implies another."""
    deps_map = feature_deps(feature_map)

    def redundant(combo: list[Feature]) -> bool:
        for feature in combo:
            for name in feature.as_group():
                deps = deps_map.get(name)
                if deps is None:
                    continue
                if any(all(n in deps for n in other.as_group()) for other in combo):
                    return True
        return False

    return [combo for combo in powerset(features, depth) if not redundant(combo)]