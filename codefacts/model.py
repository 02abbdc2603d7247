from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict


class SourceUnit(BaseModel):
	model_config = ConfigDict(frozen=True)

	path: str
	language: str
	text: str


class FileInfo(BaseModel):
	path: str
	rel_path: str
	language: str


class AnalysisResult(BaseModel):
	path: str
	language: str
	functions: List[str] = []
	call_order: List[str] = []
	dependencies: List[str] = []
	data_flow_summary: str = ""
	io_summary: str = ""
	side_effects_summary: str = ""
	diagnostic: Optional[str] = None


class TreeAnalysis(BaseModel):
	root: str
	files: List[FileInfo]
	results: List[AnalysisResult]


@dataclass
class DataFlowFacts:
	globals_written: Set[str] = field(default_factory=set)
	globals_read: Set[str] = field(default_factory=set)
	dom_created: Set[str] = field(default_factory=set)
	dom_queried: Set[str] = field(default_factory=set)
	dom_modified: Set[str] = field(default_factory=set)
	event_listeners: Set[str] = field(default_factory=set)
	storage_ops: Set[str] = field(default_factory=set)
	shared_state: Set[str] = field(default_factory=set)
	# managed-language and python front ends
	event_subscriptions: Set[str] = field(default_factory=set)
	console_input: Set[str] = field(default_factory=set)
	storage_read: Set[str] = field(default_factory=set)
	storage_write: Set[str] = field(default_factory=set)
	network_read: Set[str] = field(default_factory=set)
	network_write: Set[str] = field(default_factory=set)
	logs: Set[str] = field(default_factory=set)
	config_read: Set[str] = field(default_factory=set)
	shared_globals: Set[str] = field(default_factory=set)
	shared_nonlocals: Set[str] = field(default_factory=set)
	# markup sections hold pre-rendered items such as "imports=[a.css]"
	css: Set[str] = field(default_factory=set)
	html: Set[str] = field(default_factory=set)
	json: Set[str] = field(default_factory=set)

	@classmethod
	def field_names(cls) -> List[str]:
		return [f.name for f in fields(cls)]


@dataclass
class SourceFacts:
	"""Raw facts collected by one front end for one source unit.

	``side_effects`` is ``None`` when the unit was not analyzed for side
	effects; an empty set means it was analyzed and nothing was found.
	"""

	functions: Set[str] = field(default_factory=set)
	call_order: List[str] = field(default_factory=list)
	dependencies: Set[str] = field(default_factory=set)
	data_flow: DataFlowFacts = field(default_factory=DataFlowFacts)
	inputs: Set[str] = field(default_factory=set)
	outputs: Set[str] = field(default_factory=set)
	side_effects: Optional[Set[str]] = None

	@classmethod
	def empty(cls) -> SourceFacts:
		return cls()
