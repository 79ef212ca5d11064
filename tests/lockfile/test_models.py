"""Tests for source identity semantics."""

from __future__ import annotations

from lockstep.core.sources import SourceLocation
from lockstep.lockfile.models import SourceDescriptor, SourceIdentity, SourceKind
from lockstep.lockfile.parser import parse_source

CRUCIBLE = "https://github.com/oxidecomputer/crucible"


class TestSourceIdentity:
    def test_precise_revision_is_not_part_of_identity(self) -> None:
        a = parse_source(f"git+{CRUCIBLE}?branch=main#aaa")
        b = parse_source(f"git+{CRUCIBLE}.git?branch=main#bbb")
        assert a != b
        assert a.identity == b.identity
        assert hash(a.identity) == hash(b.identity)

    def test_reference_kind_is_part_of_identity(self) -> None:
        branch = parse_source(f"git+{CRUCIBLE}?branch=main#aaa").identity
        rev = parse_source(f"git+{CRUCIBLE}?rev=aaa#aaa").identity
        assert branch != rev

    def test_location_is_part_of_identity(self) -> None:
        crucible = parse_source(f"git+{CRUCIBLE}?branch=main#a").identity
        fork = parse_source("git+https://github.com/someone/crucible?branch=main#a").identity
        assert crucible != fork

    def test_identities_sort(self) -> None:
        location = SourceLocation.parse(CRUCIBLE)
        identities = [
            SourceIdentity(SourceKind.GIT_TAG, location, "v1"),
            SourceIdentity(SourceKind.GIT_BRANCH, location, "main"),
            SourceIdentity(SourceKind.GIT_BRANCH, location, ""),
        ]
        assert sorted(identities) == [identities[2], identities[1], identities[0]]

    def test_str_renders_source_string(self) -> None:
        assert str(parse_source(f"git+{CRUCIBLE}?tag=v1#abc").identity) == f"git+{CRUCIBLE}?tag=v1"
        assert str(parse_source(f"git+{CRUCIBLE}#abc").identity) == f"git+{CRUCIBLE}"
        registry = parse_source("registry+https://github.com/rust-lang/crates.io-index")
        assert str(registry.identity) == "registry+https://github.com/rust-lang/crates.io-index"


class TestSourceKind:
    def test_only_branches_are_movable(self) -> None:
        assert SourceKind.GIT_BRANCH.is_movable
        assert not SourceKind.GIT_TAG.is_movable
        assert not SourceKind.GIT_REV.is_movable
        assert not SourceKind.REGISTRY.is_movable

    def test_descriptor_exposes_identity_fields(self) -> None:
        location = SourceLocation.parse(CRUCIBLE)
        descriptor = SourceDescriptor(SourceIdentity(SourceKind.GIT_REV, location, "abc"), "abc")
        assert descriptor.kind is SourceKind.GIT_REV
        assert descriptor.location == location
