from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExtractionRequest(BaseModel):
    """One request to pull code out of ``source_file_path`` into ``module_name``.

    Line numbers are 1-based and inclusive.
    """

    model_config = ConfigDict(frozen=True)

    source_file_path: str
    module_name: str
    selected_text: str = ""
    start_line: int | None = Field(default=None, ge=1)
    end_line: int | None = Field(default=None, ge=1)
    function_name: str | None = None

    @model_validator(mode="after")
    def _check_target(self) -> "ExtractionRequest":
        if (self.start_line is None) != (self.end_line is None):
            raise ValueError("start_line and end_line must be given together")
        if self.start_line is not None and self.end_line is not None and self.start_line > self.end_line:
            raise ValueError(f"start_line ({self.start_line}) must not exceed end_line ({self.end_line})")
        if not self.function_name and not self.has_line_range:
            raise ValueError("Either function_name or a start_line/end_line range must be provided")
        return self

    @property
    def has_line_range(self) -> bool:
        return self.start_line is not None and self.end_line is not None


class SymbolMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: str
    start_line: int
    end_line: int
    start_offset: int
    end_offset: int


class ResolutionMethod(str, Enum):
    SYMBOL = "symbol"
    LINE_RANGE = "line_range"


class ResolvedRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_line: int
    end_line: int
    text: str
    method: ResolutionMethod


class RegionNotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str
    function_name: str | None = None
    start_line: int | None = None
    end_line: int | None = None


RegionResolution = ResolvedRegion | RegionNotFound


class ConversionInfo(BaseModel):
    needs_conversion: bool
    existing_file_path: str | None = None
    target_folder_path: str = ""
    target_mod_file_path: str = ""
    module_name: str = ""


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    MODULE_FILE = "module-file"
    SUGGESTION = "suggestion"


class DirectoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: EntryKind
    path: str
    annotation: str | None = None
    detail: str | None = None


class DirectoryListing(BaseModel):
    current_path: str
    parent_path: str
    breadcrumb: list[str]
    directories: list[DirectoryEntry] = Field(default_factory=list)
    module_files: list[DirectoryEntry] = Field(default_factory=list)
    suggestions: list[DirectoryEntry] = Field(default_factory=list)
    error: str | None = None


class NavigationState(BaseModel):
    current_path: str
    selected_path: str | None = None


class ExtractionPlan(BaseModel):
    module_name: str
    module_path: str
    method: ResolutionMethod
    start_line: int
    end_line: int
    text: str
    needs_conversion: bool = False
    conversion: ConversionInfo | None = None
    mod_file_path: str | None = None
    mod_file_lines: list[str] = Field(default_factory=list)
    usage: str
