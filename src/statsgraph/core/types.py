"""
Core type definitions for statsgraph.

Two families of models live here:

- Report records (`RawModule`, `Chunk`, `Asset`, `BuildReport`) mirror the
  bundler's stats file. They are lenient: unknown keys are ignored, missing
  keys fall back to defaults and null lists become empty lists.
- Derived descriptors (`ModuleDescriptor`, `ClusterDescriptor`,
  `DependencyEdge`) are built fresh for each compilation run and are frozen.
"""

from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Identifier = Union[int, str]
Number = Union[int, float]


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class _ReportRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RawReason(_ReportRecord):
    """One issuer record: why a module was included."""
    module_id: Optional[Identifier] = Field(default=None, alias="moduleId")
    type: str = ""
    user_request: Optional[str] = Field(default=None, alias="userRequest")

    @field_validator("type", mode="before")
    @classmethod
    def _type_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RawModule(_ReportRecord):
    """A single source module as reported by the bundler."""
    id: Optional[Identifier] = None
    name: str = ""
    identifier: Optional[str] = None
    size: Number = 0
    depth: Optional[int] = None
    reasons: List[RawReason] = Field(default_factory=list)
    provided_exports: Optional[List[str]] = Field(default=None, alias="providedExports")
    used_exports: Union[List[str], bool, None] = Field(default=None, alias="usedExports")
    chunks: List[Identifier] = Field(default_factory=list)
    source: Optional[str] = None

    @field_validator("reasons", "chunks", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("size", mode="before")
    @classmethod
    def _size(cls, value: Any) -> Any:
        return 0 if value is None else value


class Chunk(_ReportRecord):
    """A group of modules emitted as one or more output files."""
    id: Identifier
    names: List[str] = Field(default_factory=list)
    entry: bool = False
    initial: bool = False
    size: Number = 0
    hash: Optional[str] = None
    files: List[str] = Field(default_factory=list)

    @field_validator("names", "files", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @property
    def graph_id(self) -> str:
        return str(self.id)

    @property
    def display_name(self) -> str:
        """Joined chunk names, or the chunk id when the chunk is unnamed."""
        if self.names:
            return ",".join(self.names)
        return self.graph_id


class Asset(_ReportRecord):
    """An output file produced by the build."""
    name: str
    size: Number = 0


class BuildReport(_ReportRecord):
    """The whole stats report for one build."""
    hash: str = ""
    modules: List[RawModule] = Field(default_factory=list)
    chunks: List[Chunk] = Field(default_factory=list)
    assets: List[Asset] = Field(default_factory=list)

    @field_validator("modules", "chunks", "assets", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("hash", mode="before")
    @classmethod
    def _hash(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    def chunk_by_id(self, chunk_id: str) -> Optional[Chunk]:
        for chunk in self.chunks:
            if chunk.graph_id == chunk_id:
                return chunk
        return None

    def chunk_order(self) -> Dict[str, int]:
        """Position of each chunk id in the report, used for stable ordering."""
        return {chunk.graph_id: i for i, chunk in enumerate(self.chunks)}


# =============================================================================
# Derived descriptors
# =============================================================================

class PackageOrigin(BaseModel):
    """Where a module comes from when it resolves from a package directory."""
    name: str
    file_path: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def filename(self) -> str:
        return self.file_path.rsplit("/", 1)[-1] if self.file_path else ""

    @property
    def display_path(self) -> str:
        if self.file_path:
            return f"{self.name}/{self.file_path}"
        return self.name


class Issuer(BaseModel):
    """A module that caused another module to be included."""
    graph_id: str
    dependency_type: str = ""

    model_config = ConfigDict(frozen=True)


class ModuleDescriptor(BaseModel):
    """Normalized, render-ready view of one RawModule."""
    graph_id: str
    name: str
    resolved_path: str
    loaders: Tuple[str, ...] = ()
    label: str
    file_extension: str = ""
    size: Number = 0
    depth: Optional[int] = None
    package: Optional[PackageOrigin] = None
    issuers: Tuple[Issuer, ...] = ()
    is_entry: bool = False
    provided_exports: Tuple[str, ...] = ()
    used_exports: Tuple[str, ...] = ()
    source: Optional[str] = None
    chunk_ids: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_entry_point(self) -> bool:
        """Entry points (depth 0) render with an arrow shape."""
        return self.depth == 0

    @property
    def tooltip_path(self) -> str:
        if self.package and self.package.name and self.package.file_path:
            return self.package.display_path
        return self.name


class ClusterDescriptor(BaseModel):
    """One cluster per unique chunk-membership signature."""
    graph_id: str
    label: str
    is_overlap: bool = False
    chunk_ids: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def cluster_id(self) -> str:
        return f"cluster_{self.graph_id}"

    @property
    def signature(self) -> FrozenSet[str]:
        return frozenset(self.chunk_ids)


class DependencyEdge(BaseModel):
    """Directed edge from issuer to dependent module."""
    source_id: str
    target_id: str
    dependency_type: str = ""

    model_config = ConfigDict(frozen=True)
