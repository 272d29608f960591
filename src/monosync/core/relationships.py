"""Static parent/child repository relationships.

A parent (monorepo) contains each child repository's contents under a
subdirectory. Built once from configuration and never mutated.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

Relationship = Literal["parent", "child"]


@dataclass(frozen=True)
class RepositoryRelationship:
    """Directed edge parent -> child; `path` is the child's root inside the parent."""

    parent: str
    child: str
    path: str


@dataclass(frozen=True)
class ChildRepo:
    name: str
    path: str


def _normalize_path(path: str) -> str:
    return path.strip().strip("/")


def path_is_within(file_path: str, directory: str) -> bool:
    """Check whether file_path lies inside directory (no partial segment matches)."""
    return file_path == directory or file_path.startswith(f"{directory}/")


class RelationshipDirectory:
    """Immutable lookup of repository relationships, indexed by repository name.

    A repository has at most one parent and any number of children, kept in
    declaration order.
    """

    def __init__(self, relationships: Iterable[RepositoryRelationship]) -> None:
        parents: dict[str, str] = {}
        children: dict[str, list[ChildRepo]] = {}
        edges: list[RepositoryRelationship] = []

        for rel in relationships:
            path = _normalize_path(rel.path)
            if not path:
                msg = f"Relationship {rel.parent} -> {rel.child} needs a non-empty path"
                raise ValueError(msg)
            if rel.parent == rel.child:
                msg = f"Repository {rel.parent} cannot be its own parent"
                raise ValueError(msg)
            existing_parent = parents.get(rel.child)
            if existing_parent is not None:
                msg = (
                    f"Repository {rel.child} has two parents: {existing_parent} and {rel.parent}"
                )
                raise ValueError(msg)
            parents[rel.child] = rel.parent
            children.setdefault(rel.parent, []).append(ChildRepo(name=rel.child, path=path))
            edges.append(RepositoryRelationship(parent=rel.parent, child=rel.child, path=path))

        self._parents = parents
        self._children = {name: tuple(repos) for name, repos in children.items()}
        self._relationships = tuple(edges)

    @property
    def relationships(self) -> tuple[RepositoryRelationship, ...]:
        return self._relationships

    def has_parent(self, repo_name: str) -> bool:
        return repo_name in self._parents

    def get_parent_name(self, repo_name: str) -> str | None:
        return self._parents.get(repo_name)

    def has_children(self, repo_name: str) -> bool:
        return repo_name in self._children

    def get_children(self, repo_name: str) -> tuple[ChildRepo, ...]:
        return self._children.get(repo_name, ())

    def get_children_names(self, repo_name: str) -> list[str]:
        return [child.name for child in self.get_children(repo_name)]

    def get_child(self, parent_name: str, child_name: str) -> ChildRepo | None:
        for child in self.get_children(parent_name):
            if child.name == child_name:
                return child
        return None

    def has_relationship(self, repo_name: str) -> bool:
        return self.has_parent(repo_name) or self.has_children(repo_name)

    def get_related_repo_names(self, repo_name: str) -> list[str]:
        """Parent first (if any), then children in declaration order."""
        related: list[str] = []
        parent = self.get_parent_name(repo_name)
        if parent is not None:
            related.append(parent)
        related.extend(self.get_children_names(repo_name))
        return related

    def get_relationship(self, repo_name: str, other_repo_name: str) -> Relationship | None:
        """Describe repo_name relative to other_repo_name.

        Returns:
            "parent" if repo_name is the parent of other_repo_name,
            "child" if repo_name is a child of other_repo_name, else None
        """
        if self.get_child(repo_name, other_repo_name) is not None:
            return "parent"
        if self.get_parent_name(repo_name) == other_repo_name:
            return "child"
        return None

    def get_child_for_path(self, parent_name: str, file_path: str) -> ChildRepo | None:
        """Return the child whose subdirectory owns file_path, or None."""
        for child in self.get_children(parent_name):
            if path_is_within(file_path, child.path):
                return child
        return None
